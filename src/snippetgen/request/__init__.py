"""Request decomposition -- split a captured HTTP request into its parts.

See :func:`~snippetgen.request.decomposer.decompose_request`.
"""

from snippetgen.request.decomposer import decompose_request, split_path

__all__ = ["decompose_request", "split_path"]
