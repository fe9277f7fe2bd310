"""Built-in layout templates.

Layouts form a closed set shipped with the package. Templates are Jinja2
sources held in a DictLoader and rendered in a sandbox with autoescaping;
post content is only ever passed in as data.
"""

from __future__ import annotations

from enum import StrEnum

from jinja2 import DictLoader, StrictUndefined
from jinja2.sandbox import SandboxedEnvironment


class Layout(StrEnum):
    """Layouts a post may name in its front matter."""

    POST = "post"
    PAGE = "page"


BASE_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{% block title %}{{ site.title }}{% endblock %}</title>
{% if site.description %}<meta name="description" content="{{ site.description }}">
{% endif %}{% block head %}{% endblock %}\
{% if site.url %}<link rel="alternate" type="application/atom+xml" title="{{ site.title }}" href="{{ site.base_path }}feed.xml">
{% endif %}</head>
<body>
<header><a href="{{ site.base_path }}index.html">{{ site.title }}</a></header>
<main>
{% block main %}{% endblock %}
</main>
</body>
</html>
"""

POST_TEMPLATE = """\
{% extends "base.html" %}
{% block title %}{{ post.title }} | {{ site.title }}{% endblock %}
{% block head %}\
{% if post.description %}<meta name="description" content="{{ post.description }}">
{% endif %}{% if post.canonical_url %}<link rel="canonical" href="{{ post.canonical_url }}">
{% endif %}{% endblock %}
{% block main %}
<article class="post">
<h1>{{ post.title }}</h1>
<p class="meta"><time datetime="{{ post.publication_date.isoformat() }}">{{ post.publication_date.strftime("%B %d, %Y") }}</time>\
{% if site.author %} by {{ site.author }}{% endif %}</p>
{% if post.canonical_url %}<p class="canonical">Originally published at <a href="{{ post.canonical_url }}">{{ post.canonical_url }}</a>.</p>
{% endif %}\
{{ content }}
{% if post.tags %}<ul class="tags">
{% for tag in post.tags %}<li><a href="{{ site.base_path }}tags/{{ tag_slugs[tag] }}.html">{{ tag }}</a></li>
{% endfor %}</ul>
{% endif %}\
</article>
{% endblock %}
"""

PAGE_TEMPLATE = """\
{% extends "base.html" %}
{% block title %}{{ post.title }} | {{ site.title }}{% endblock %}
{% block main %}
<article class="page">
<h1>{{ post.title }}</h1>
{{ content }}
</article>
{% endblock %}
"""

LISTING_TEMPLATE = """\
{% extends "base.html" %}
{% block title %}{% if heading %}{{ heading }} | {% endif %}{{ site.title }}{% endblock %}
{% block main %}
<h1>{{ heading or site.title }}</h1>
<ul class="posts">
{% for entry in entries %}<li>
<time datetime="{{ entry.date.isoformat() }}">{{ entry.date.isoformat() }}</time>
<a href="{{ entry.permalink }}">{{ entry.title }}</a>
{% if entry.description %}<p>{{ entry.description }}</p>
{% endif %}</li>
{% endfor %}</ul>
{% endblock %}
"""

FEED_TEMPLATE = """\
<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
<title>{{ site.title }}</title>
<id>{{ site_url }}</id>
<link href="{{ site_url }}"/>
<link rel="self" href="{{ site_url }}feed.xml"/>
<updated>{{ updated }}</updated>
{% if site.author %}<author><name>{{ site.author }}</name></author>
{% endif %}\
{% for entry in entries %}<entry>
<title>{{ entry.title }}</title>
<id>{{ site_url }}{{ entry.permalink.lstrip("/") }}</id>
<link href="{{ site_url }}{{ entry.permalink.lstrip("/") }}"/>
<updated>{{ entry.date.isoformat() }}T00:00:00Z</updated>
{% if entry.description %}<summary>{{ entry.description }}</summary>
{% endif %}</entry>
{% endfor %}</feed>
"""

TEMPLATES: dict[str, str] = {
    "base.html": BASE_TEMPLATE,
    "post.html": POST_TEMPLATE,
    "page.html": PAGE_TEMPLATE,
    "listing.html": LISTING_TEMPLATE,
    "feed.xml": FEED_TEMPLATE,
}

LAYOUT_TEMPLATES: dict[Layout, str] = {
    Layout.POST: "post.html",
    Layout.PAGE: "page.html",
}


def create_environment() -> SandboxedEnvironment:
    """Sandboxed, autoescaping environment over the built-in templates."""
    return SandboxedEnvironment(
        loader=DictLoader(TEMPLATES),
        autoescape=True,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )
