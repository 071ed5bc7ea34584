"""Update, manage and pin the GitHub Actions used by your workflows."""

__version__ = "0.1.0"
