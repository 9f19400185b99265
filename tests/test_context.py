import unittest
from datetime import datetime, timezone

from normalize.models import Identity, Issue, Commit, PullRequest
from report.context import build_sections, render_context, render_intent_prompt, render_summary_prompt
from storage.cache import DataKind

NOW = datetime(2025, 1, 10, 12, 0, 0, tzinfo=timezone.utc)
MIKE = Identity('mike', 'Mike Ross', 'mikeross88')

ISSUE = Issue('TS-102', 'Fix login bug', 'In Progress', 'Bug', 'High', '2025-01-10T10:00:00.000+0000',
              'https://acme.atlassian.net/browse/TS-102')
COMMIT = Commit('Fix login redirect\n\nlonger body text', 'mikeross88', '2025-01-10T11:00:00Z', 'acme/api', 'abc123',
                'https://github.com/acme/api/commit/abc123')
PR = PullRequest('Add retries to client', 'mikeross88', 'acme/api', 'open', 'https://github.com/acme/api/pull/7', 7,
                 '2025-01-09T12:00:00Z')


class TestContext(unittest.TestCase):
    def test_sections_follow_fixed_order_and_skip_unfetched(self):
        sections = build_sections({DataKind.COMMITS: [COMMIT], DataKind.ISSUES: [ISSUE]}, NOW)
        self.assertEqual([s['kind'] for s in sections], ['issues', 'commits'])
        self.assertEqual(sections[1]['records'][0]['headline'], 'Fix login redirect')
        self.assertEqual(sections[0]['records'][0]['relativeTime'], '2 hours ago')

    def test_context_lines(self):
        text = render_context({DataKind.ISSUES: [ISSUE], DataKind.REVIEWS: [PR], DataKind.COMMITS: [COMMIT]}, NOW)
        self.assertLess(text.index('JIRA DATA'), text.index('Open Pull Requests'))
        self.assertLess(text.index('Open Pull Requests'), text.index('Commits in the last 7 days'))
        self.assertIn('TS-102: Fix login bug | status: In Progress | priority: High', text)
        self.assertIn('#7 "Add retries to client" in acme/api', text)
        self.assertIn('"Fix login redirect" in acme/api | 1 hour ago', text)
        self.assertNotIn('longer body text', text)

    def test_empty_fetched_section_says_none_found(self):
        text = render_context({DataKind.ISSUES: [ISSUE], DataKind.REVIEWS: []}, NOW)
        self.assertIn('GITHUB DATA (Open Pull Requests)', text)
        self.assertIn('(none found)', text)
        self.assertNotIn('Commits', text)

    def test_issues_prompt_never_mentions_code_activity(self):
        prompt = render_summary_prompt('What JIRA tickets is Mike working on?', MIKE, {DataKind.ISSUES: [ISSUE]}, NOW)
        self.assertIn('TS-102', prompt)
        self.assertIn('Fix login bug', prompt)
        self.assertIn('2 hours ago', prompt)
        self.assertIn('Mike Ross (JIRA) / mikeross88 (GitHub)', prompt)
        lowered = prompt.lower()
        self.assertNotIn('commit', lowered)
        self.assertNotIn('pull request', lowered)

    def test_commits_prompt_is_scoped_to_commits(self):
        prompt = render_summary_prompt("What has Mike committed?", MIKE, {DataKind.COMMITS: [COMMIT]}, NOW)
        self.assertIn('Talk only about the commits listed.', prompt)
        self.assertNotIn('JIRA DATA', prompt)
        self.assertNotIn('Open Pull Requests', prompt)

    def test_full_summary_prompt_includes_everything(self):
        prompt = render_summary_prompt('What is Mike up to?', MIKE,
                                       {DataKind.ISSUES: [ISSUE], DataKind.REVIEWS: [PR], DataKind.COMMITS: [COMMIT]}, NOW)
        self.assertIn('Include everything listed above, briefly.', prompt)
        for marker in ('TS-102', '#7', 'Fix login redirect'):
            self.assertIn(marker, prompt)

    def test_question_is_not_html_escaped(self):
        prompt = render_intent_prompt("What's Mike's <status>?")
        self.assertIn("What's Mike's <status>?", prompt)


if __name__ == '__main__':
    unittest.main()
