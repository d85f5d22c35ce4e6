"""pawnpath: branching game trees and exercise-board move hints."""

__version__ = "0.1.0"
