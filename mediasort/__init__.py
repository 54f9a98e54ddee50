"""
mediasort - Sort photos and videos into a year-month folder structure.

Files are renamed after their DateTimeOriginal capture timestamp and placed
under OUTPUT/YYYY-MM/ext/, with content-checked collision handling so no
file is ever overwritten. MIT License.
"""

__version__ = "1.0.0"


# Public API
from .classifier import Classification, classify
from .cli import main
from .collisions import CollisionResolver, Resolution
from .config import Config, SortOptions
from .core import MediaSorter
from .file_operations import FileOperations
from .history import HistoryManager
from .ignore import IgnoreList
from .stats import Outcome, RunSummary

__all__ = [ "main", "Config", "SortOptions", "MediaSorter", "Classification", "classify",
            "CollisionResolver", "Resolution", "FileOperations", "HistoryManager",
            "IgnoreList", "Outcome", "RunSummary" ]
