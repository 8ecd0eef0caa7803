"""Custom exceptions for rendering context with backend references."""

from typing import Optional


class RenderBackendError(Exception):
    """
    Exception raised when the typesetting backend fails to measure or render.

    Attributes:
        message: Error description
        operation: Backend operation that failed ('measure' or 'render')
        block_id: Block being laid out when the failure happened, if known
        original_error: The original backend error
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        block_id: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.operation = operation
        self.block_id = block_id
        self.original_error = original_error

        # Build enhanced error message
        parts = [message]

        if operation:
            parts.append(f"\nOperation: {operation}")

        if block_id:
            parts.append(f"Block: {block_id}")

        if original_error:
            parts.append(f"\nOriginal error: {str(original_error)}")

        super().__init__("\n".join(parts))


class TemplateRenderError(Exception):
    """
    Exception raised when a markup template fails to render.

    Attributes:
        message: Error description
        template_name: Name of the template
        original_error: The original Jinja2 error
    """

    def __init__(
        self,
        message: str,
        template_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.template_name = template_name
        self.original_error = original_error

        parts = [message]

        if template_name:
            parts.append(f"\nTemplate: {template_name}")

        if original_error:
            parts.append(f"\nOriginal error: {str(original_error)}")

        super().__init__("\n".join(parts))
