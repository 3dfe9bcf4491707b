"""Tests for the tag index."""

from bulletin_pkg.paths import short_hash
from bulletin_pkg.tags import assign_tag_slugs, build_tag_index


class TestBuildTagIndex:
    """Test cases for build_tag_index."""

    def test_posts_appear_under_every_tag(self, make_post):
        a = make_post('a', tags=['flu', 'covid'])
        b = make_post('b', tags=['flu'])
        groups = {g.tag: g for g in build_tag_index([a, b])}

        assert set(groups) == {'flu', 'covid'}
        assert groups['flu'].posts == [a, b]
        assert groups['covid'].posts == [a]

    def test_posts_sorted_newest_first(self, make_post):
        old = make_post('old', tags=['flu'], date_value='2023-01-01')
        new = make_post('new', tags=['flu'], date_value='2024-01-01')
        group = build_tag_index([old, new])[0]

        assert group.posts == [new, old]

    def test_tags_are_case_sensitive(self, make_post):
        a = make_post('a', tags=['Flu'])
        b = make_post('b', tags=['flu'])
        groups = build_tag_index([a, b])

        assert [g.tag for g in groups] == ['Flu', 'flu']
        assert groups[0].slug == 'flu'
        assert groups[1].slug == f'flu-{short_hash("flu")}'

    def test_output_path_uses_slug(self, make_post):
        group = build_tag_index([make_post('a', tags=['COVID-19 Updates'])])[0]
        assert group.output_path == 'tags/covid-19-updates.html'

    def test_hrefs_rewritten_for_tag_page(self, make_post):
        nested = make_post('nested', tags=['x'], directory='posts', date_value='2024-02-01')
        top = make_post('top', tags=['x'], directory='root', date_value='2024-01-01')
        group = build_tag_index([nested, top])[0]

        assert [p['href'] for p in group.post_dicts()] == ['../posts/nested.html', '../top.html']

    def test_duplicate_tags_on_one_post(self, make_post):
        a = make_post('a', tags=['x', 'x'])
        assert build_tag_index([a])[0].posts == [a]

    def test_empty_corpus(self):
        assert build_tag_index([]) == []


class TestAssignTagSlugs:
    """Test cases for tag slug collision handling."""

    def test_unique_slugs_untouched(self):
        assert assign_tag_slugs(['Flu Season', 'covid']) == {'Flu Season': 'flu-season', 'covid': 'covid'}

    def test_collisions_are_disambiguated(self):
        slugs = assign_tag_slugs(['Public Health', 'public-health', 'PUBLIC HEALTH'])

        assert slugs['Public Health'] == 'public-health'
        assert slugs['public-health'] != 'public-health'
        assert len(set(slugs.values())) == 3

    def test_empty_slug_gets_hash_name(self):
        assert assign_tag_slugs(['???']) == {'???': f'tag-{short_hash("???")}'}

    def test_disambiguated_slug_never_reuses_a_taken_slug(self):
        taken_name = f'flu-{short_hash("FLU")}'
        slugs = assign_tag_slugs(['flu', taken_name, 'FLU'])

        assert slugs['flu'] == 'flu'
        assert slugs[taken_name] == taken_name
        assert slugs['FLU'] == f'{taken_name}-2'
        assert len(set(slugs.values())) == 3
