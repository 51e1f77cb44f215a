"""The package version, as recorded by setuptools_scm when it was built."""

from typing import Tuple, Union

try:
    from ._generated_version import version  # type: ignore[import-not-found]
    from ._generated_version import version_tuple  # type: ignore[import-not-found]
except ImportError:
    # Running from a source tree that was never built or installed.
    version = "0.0.0.dev0+local-checkout"
    version_tuple: Tuple[Union[int, str], ...] = (0, 0, 0, "dev0", "local-checkout")
