from lil.models.short_link_model import ShortLinkModel, SearchPage


__all__ = [
    'ShortLinkModel',
    'SearchPage',
]
