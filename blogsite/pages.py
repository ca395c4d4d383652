from __future__ import annotations

import html
from pathlib import Path
from typing import Sequence

from .config import SiteSettings
from .models import Post, TagGroup
from .render import render_template, write_text
from .utils import join_url, rfc822_date

TagGroups = Sequence[TagGroup]


def tag_url(root: str, slug: str) -> str:
    return f"{root}/tags/{slug}.html"


def tag_slug_map(tag_groups: TagGroups) -> dict[str, str]:
    return {group.name.casefold(): group.slug for group in tag_groups}


def footer_year(posts: Sequence[Post]) -> str:
    # Derived from content so rebuilding an unchanged site gives the same bytes
    return str(posts[0].date.year) if posts else ""


def build_tag_list(tag_groups: TagGroups, root: str) -> str:
    items = []
    for group in sorted(tag_groups, key=lambda g: (-len(g.posts), g.slug)):
        items.append(
            f'<li><a href="{tag_url(root, group.slug)}">{html.escape(group.name)}</a>'
            f'<span class="count">{len(group.posts)}</span></li>'
        )
    return "\n".join(items) if items else "<li>No tags yet.</li>"


def build_sidebar(tag_groups: TagGroups, root: str) -> str:
    return (
        '<div class="panel">'
        "<h3>Tags</h3>"
        f'<ul class="tag-list">{build_tag_list(tag_groups, root)}</ul>'
        "</div>"
    )


def build_tag_chips(post: Post, root: str, slugs: dict[str, str]) -> str:
    return " ".join(
        f'<a class="chip" href="{tag_url(root, slugs[tag.casefold()])}">{html.escape(tag)}</a>' for tag in post.tags
    )


def build_post_cards(posts: Sequence[Post], root: str, tag_groups: TagGroups) -> str:
    if not posts:
        return '<p class="empty">No posts yet.</p>'
    slugs = tag_slug_map(tag_groups)
    cards = []
    for post in posts:
        url = f"{root}/posts/{post.slug}.html"
        featured = '<span class="post-featured">Featured</span>' if post.featured else ""
        cards.append(
            '<article class="post-card">'
            '<div class="post-meta">'
            f'<time class="post-date" datetime="{post.date.isoformat()}">{post.date.isoformat()}</time>'
            f'<span class="post-reading-time">{post.reading_time}</span>'
            f"{featured}"
            f'<div class="post-tags">{build_tag_chips(post, root, slugs)}</div>'
            "</div>"
            f'<h2 class="post-title"><a href="{url}">{html.escape(post.title)}</a></h2>'
            f'<p class="post-summary">{html.escape(post.excerpt)}</p>'
            f'<a class="post-more" href="{url}">Read more</a>'
            "</article>"
        )
    return "\n".join(cards)


def render_page(
    base_template: str,
    settings: SiteSettings,
    *,
    title: str,
    root: str,
    content: str,
    sidebar: str,
    year: str,
    extra_head: str = "",
) -> str:
    return render_template(
        base_template,
        title=html.escape(title),
        root=root,
        content=content,
        sidebar=sidebar,
        site_name=html.escape(settings.site_name),
        site_description=html.escape(settings.site_description),
        year=year,
        extra_head=extra_head,
    )


def build_listing(
    base_template: str,
    output_path: Path,
    posts: Sequence[Post],
    tag_groups: TagGroups,
    settings: SiteSettings,
    *,
    root: str,
    heading: str,
    intro: str,
    title: str,
    year: str,
) -> None:
    content = (
        '<div class="section-head">'
        f"<h1>{html.escape(heading)}</h1>"
        f"<p>{html.escape(intro)}</p>"
        "</div>"
        f'<div class="post-grid">{build_post_cards(posts, root, tag_groups)}</div>'
    )
    html_doc = render_page(
        base_template,
        settings,
        title=title,
        root=root,
        content=content,
        sidebar=build_sidebar(tag_groups, root),
        year=year,
    )
    write_text(output_path, html_doc)


def build_index(
    base_template: str, output_dir: Path, posts: Sequence[Post], tag_groups: TagGroups, settings: SiteSettings
) -> list[Path]:
    path = output_dir / "index.html"
    build_listing(
        base_template,
        path,
        posts,
        tag_groups,
        settings,
        root=".",
        heading="Latest posts",
        intro=settings.site_description,
        title=f"{settings.site_name} | Home",
        year=footer_year(posts),
    )
    return [path]


def build_featured(
    base_template: str,
    output_dir: Path,
    featured: Sequence[Post],
    tag_groups: TagGroups,
    settings: SiteSettings,
    year: str,
) -> list[Path]:
    path = output_dir / "featured.html"
    build_listing(
        base_template,
        path,
        featured,
        tag_groups,
        settings,
        root=".",
        heading="Featured",
        intro="Hand-picked posts.",
        title=f"Featured | {settings.site_name}",
        year=year,
    )
    return [path]


def build_tag_pages(
    base_template: str, output_dir: Path, tag_groups: TagGroups, settings: SiteSettings, year: str
) -> list[Path]:
    written = []
    for group in tag_groups:
        name = group.name
        path = output_dir / "tags" / f"{group.slug}.html"
        count = len(group.posts)
        build_listing(
            base_template,
            path,
            group.posts,
            tag_groups,
            settings,
            root="..",
            heading=f"Tagged: {name}",
            intro=f"{count} {'post' if count == 1 else 'posts'} tagged {name}.",
            title=f"{name} | {settings.site_name}",
            year=year,
        )
        written.append(path)
    return written


def build_tags_overview(
    base_template: str, output_dir: Path, tag_groups: TagGroups, settings: SiteSettings, year: str
) -> list[Path]:
    root = "."
    content = (
        '<div class="section-head">'
        "<h1>Tags</h1>"
        "<p>Every topic on the blog.</p>"
        "</div>"
        f'<ul class="tag-list tag-list--all">{build_tag_list(tag_groups, root)}</ul>'
    )
    html_doc = render_page(
        base_template,
        settings,
        title=f"Tags | {settings.site_name}",
        root=root,
        content=content,
        sidebar="",
        year=year,
    )
    path = output_dir / "tags.html"
    write_text(path, html_doc)
    return [path]


def build_posts(
    base_template: str,
    output_dir: Path,
    posts: Sequence[Post],
    tag_groups: TagGroups,
    settings: SiteSettings,
    year: str,
) -> list[Path]:
    root = ".."
    sidebar = build_sidebar(tag_groups, root)
    slugs = tag_slug_map(tag_groups)
    written = []
    for post in posts:
        cover = ""
        if post.cover_image:
            cover = f'<img class="post-cover" src="{html.escape(post.cover_image)}" alt="">'
        content = (
            '<article class="post">'
            '<div class="post-meta">'
            f'<time class="post-date" datetime="{post.date.isoformat()}">{post.date.isoformat()}</time>'
            f'<span class="post-reading-time">{post.reading_time}</span>'
            f'<div class="post-tags">{build_tag_chips(post, root, slugs)}</div>'
            "</div>"
            f'<h1 class="post-title">{html.escape(post.title)}</h1>'
            f"{cover}"
            f'<div class="post-body">{post.body_html}</div>'
            f'<div class="post-footer"><a href="{root}/index.html">Back to home</a></div>'
            "</article>"
        )
        html_doc = render_page(
            base_template,
            settings,
            title=f"{post.title} | {settings.site_name}",
            root=root,
            content=content,
            sidebar=sidebar,
            year=year,
        )
        path = output_dir / "posts" / f"{post.slug}.html"
        write_text(path, html_doc)
        written.append(path)
    return written


def build_rss(output_dir: Path, posts: Sequence[Post], settings: SiteSettings) -> list[Path]:
    site_url = settings.site_url.rstrip("/")
    if not site_url:
        return []
    items = []
    for post in posts[: settings.feed_limit]:
        link = join_url(site_url, f"posts/{post.slug}.html")
        lines = [
            "<item>",
            f"<title>{html.escape(post.title)}</title>",
            f"<link>{link}</link>",
            f'<guid isPermaLink="true">{link}</guid>',
            f"<pubDate>{rfc822_date(post.date)}</pubDate>",
            f"<description>{html.escape(post.excerpt)}</description>",
        ]
        lines.extend(f"<category>{html.escape(tag)}</category>" for tag in post.tags)
        lines.append("</item>")
        items.append("\n".join(lines))
    last_build = rfc822_date(posts[0].date) if posts else ""
    rss = "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">',
            "<channel>",
            f"<title>{html.escape(settings.site_name)}</title>",
            f"<link>{site_url}/</link>",
            f"<description>{html.escape(settings.site_description)}</description>",
            f"<lastBuildDate>{last_build}</lastBuildDate>",
            f'<atom:link href="{site_url}/rss.xml" rel="self" type="application/rss+xml"/>',
            "\n".join(items),
            "</channel>",
            "</rss>",
        ]
    )
    path = output_dir / "rss.xml"
    write_text(path, rss)
    return [path]


def build_sitemap(
    output_dir: Path, posts: Sequence[Post], tag_groups: TagGroups, settings: SiteSettings
) -> list[Path]:
    site_url = settings.site_url.rstrip("/")
    if not site_url:
        return []
    urls = [
        (site_url + "/", None),
        (join_url(site_url, "featured.html"), None),
        (join_url(site_url, "tags.html"), None),
    ]
    for post in posts:
        urls.append((join_url(site_url, f"posts/{post.slug}.html"), post.date))
    for group in tag_groups:
        urls.append((join_url(site_url, f"tags/{group.slug}.html"), None))
    items = []
    for url, lastmod in urls:
        if lastmod:
            items.append(f"<url>\n<loc>{url}</loc>\n<lastmod>{lastmod.isoformat()}</lastmod>\n</url>")
        else:
            items.append(f"<url>\n<loc>{url}</loc>\n</url>")
    sitemap = "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
            "\n".join(items),
            "</urlset>",
        ]
    )
    path = output_dir / "sitemap.xml"
    write_text(path, sitemap)
    return [path]
