"""shortlink: link-allocation and resolution engine of a URL shortening service."""
