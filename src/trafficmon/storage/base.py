"""
Abstract base class for day bucket storage backends.

This module defines the DataStorage abstract base class which serves as the
interface for storage backend implementations. The aggregation store talks to
persisted files only through this interface.

The interface includes methods for:
- Saving and loading dictionary data
- Deleting files and listing a directory
- Checking file existence
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class DataStorage(ABC):
    """Abstract base class for data storage implementations."""

    #: File extension (without the dot) written by this backend.
    extension: str = ""

    @abstractmethod
    def save_dict(self, data: Dict[str, Any], path: str) -> None:
        """
        Save dictionary data to the specified path.

        Args:
            data: Dictionary data to save
            path: File path to save to
        """
        pass

    @abstractmethod
    def load_dict(self, path: str) -> Dict[str, Any]:
        """
        Load dictionary data from the specified path.

        Args:
            path: File path to load from

        Returns:
            Loaded dictionary data
        """
        pass

    @abstractmethod
    def delete(self, path: str) -> None:
        """
        Delete the file at the specified path.

        Args:
            path: File path to delete
        """
        pass

    @abstractmethod
    def list_files(self, directory: str) -> List[str]:
        """
        List the names of regular files in a directory.

        Args:
            directory: Directory to enumerate

        Returns:
            File names (not paths), sorted
        """
        pass

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        """
        Check if a file exists at the specified path.
        """
        pass
