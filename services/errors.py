# services/errors.py


class UnauthenticatedError(Exception):
    """No active session when a data operation was attempted"""


class NotFoundError(Exception):
    """A scoped get/update/delete matched zero rows"""


class EmptyChartSelectionError(ValueError):
    """Export confirmed with no chart selected"""


class ExportError(Exception):
    """Rendering or writing the PDF report failed"""
