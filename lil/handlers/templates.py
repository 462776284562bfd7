"""Interstitial page rendering

The page is a `string.Template` with two placeholders, both HTML-escaped:
`$target` (destination URL) and `$shortcode`.
"""

import html
from pathlib import Path
from string import Template
from typing import Optional

from lil.exceptions import BadConfigurationError


DEFAULT_REDIRECT_PAGE = Template(
    """<!doctype html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="robots" content="noindex">
    <title>Redirecting</title>
</head>
<body>
    <p>The link <code>$shortcode</code> points to:</p>
    <p><a href="$target" rel="noopener noreferrer">$target</a></p>
    <p>Follow the link above to continue.</p>
</body>
</html>
"""
)


def load_redirect_template(path: Optional[str]) -> Template:
    """Load the interstitial page template, falling back to the built-in page

    Raises:
        BadConfigurationError: if a configured template can't be read.
    """
    if not path:
        return DEFAULT_REDIRECT_PAGE
    try:
        return Template(Path(path).read_text(encoding='utf-8'))
    except OSError as e:
        raise BadConfigurationError(f"Couldn't load redirect template {path!r}.") from e


def render_redirect_page(template: Template, target: str, shortcode: str) -> str:
    return template.safe_substitute(target=html.escape(target, quote=True), shortcode=html.escape(shortcode))
