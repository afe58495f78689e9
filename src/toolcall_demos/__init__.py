"""toolcall-demos: console demos of LLM tool calling with a security filter.

This package registers callable plugins (currency conversion, weather lookup),
lets the model decide when to call them, and runs every call through an
invocation policy filter.
"""

from toolcall_demos.kernel import Kernel, create_kernel

__version__ = "0.1.0"

__all__ = ["Kernel", "create_kernel", "__version__"]
