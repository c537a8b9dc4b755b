from inputfilter.sdk.client import FilterAPIError, FilterClient, FilterError

__all__ = ["FilterClient", "FilterError", "FilterAPIError"]
