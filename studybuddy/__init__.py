"""studybuddy: study cards mirrored to a StudyBuddy reviewer over BLE."""

__version__ = "0.1.0"

from studybuddy.models import CATEGORIES, Card, Category, Phase, SyncResult
from studybuddy.app import App

__all__ = ["App", "CATEGORIES", "Card", "Category", "Phase", "SyncResult"]
