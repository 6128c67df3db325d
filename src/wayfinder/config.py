"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(api_prefix="rpc", nest_layouts=True)
    """

    # API namespace segment prepended to every ``api`` route pattern
    api_prefix: str = "api"
    default_api_method: str = "GET"

    # Asset requests that resolve to "no content" instead of a route
    reserved_paths: tuple[str, ...] = ("/favicon.ico",)

    # Sort on every registration; False defers to the first lookup after registering
    sort_on_register: bool = True

    # render() wraps with the whole layout chain instead of the innermost layout
    nest_layouts: bool = False
