def make_resize_filter(cache):
    """Build the `resize` template filter bound to a ResizeCache.

    Template usage:
        {{ "/assets/a.png" | resize("800x800") }}
        {{ "/assets/a.png" | resize("800x800", "webp") }}
        {{ "/assets/a.png" | resize("800x800|webp") }}
    """
    def resize(source, options, format=None):
        return cache.resize(source, options, format)
    return resize


def register_filters(app, cache):
    """Register all template filters on the Flask app."""
    app.template_filter('resize')(make_resize_filter(cache))
