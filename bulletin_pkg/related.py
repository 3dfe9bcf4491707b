"""Related-post ranking by shared tags."""

from typing import Dict, List, Optional


def build_tag_lookup(posts) -> Dict[str, List]:
    """Inverted index of tag -> posts carrying it, in corpus order."""
    lookup = {}
    for post in posts:
        for tag in dict.fromkeys(post.tags):
            lookup.setdefault(tag, []).append(post)
    return lookup


def related_posts(post, corpus, max_count=3, tag_lookup: Optional[Dict[str, List]] = None):
    """
    Return up to ``max_count`` posts sharing tags with ``post``.

    Candidates are scored by how many of ``post``'s tags they carry and
    ordered by score, then by date (newest first), then by slug. The post
    itself and candidates without a shared tag are never returned.

    Passing ``tag_lookup`` (see ``build_tag_lookup``) limits scoring to posts
    that share at least one tag instead of scanning the whole corpus.
    """
    tags = set(post.tags)
    if not tags or max_count <= 0:
        return []

    if tag_lookup is not None:
        candidates = {}
        for tag in tags:
            for candidate in tag_lookup.get(tag, ()):
                candidates[id(candidate)] = candidate
        candidates = candidates.values()
    else:
        candidates = corpus

    scored = []
    for candidate in candidates:
        if candidate.slug == post.slug:
            continue
        score = len(tags.intersection(candidate.tags))
        if score > 0:
            scored.append((score, candidate))

    scored.sort(key=lambda item: item[1].slug)
    scored.sort(key=lambda item: (item[0], item[1].sort_date), reverse=True)
    return [candidate for _, candidate in scored[:max_count]]
