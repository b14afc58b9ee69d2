from clicklinks.models.short_link_model import ShortLinkModel, ClickEventModel, GeoModel


__all__ = [
    'ShortLinkModel',
    'ClickEventModel',
    'GeoModel',
]
