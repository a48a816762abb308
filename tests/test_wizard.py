"""
Unit tests for wizard.py.
"""

import tempfile
import unittest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from session_store import AccountService, JsonStore
from shorts_types import GeneratedImage, ScriptData, Step, User
from wizard import PaywallRequired, ShortProject, next_step, previous_step

SCRIPT = ScriptData(hook="h", main_content="m", ending="e", keywords=[], estimated_duration=2)


class TestNavigation(unittest.TestCase):

    def test_steps_in_order(self):
        user = User(email="a", credits=3)
        step = Step.AUTH
        visited = [step]
        while step is not Step.DOWNLOAD:
            step = next_step(step, user)
            visited.append(step)
        self.assertEqual(visited, list(Step))

    def test_last_and_first_step_stay(self):
        self.assertIs(next_step(Step.DOWNLOAD, None), Step.DOWNLOAD)
        self.assertIs(previous_step(Step.AUTH), Step.AUTH)
        self.assertIs(previous_step(Step.IMAGE_GENERATOR), Step.SCRIPT_GENERATION)

    def test_paywall_on_niche_selection(self):
        with self.assertRaises(PaywallRequired):
            next_step(Step.NICHE_SELECTION, User(email="a", credits=0))
        self.assertIs(
            next_step(Step.NICHE_SELECTION, User(email="a", credits=0, is_premium=True)),
            Step.SCRIPT_GENERATION,
        )

    def test_no_paywall_on_later_steps(self):
        self.assertIs(next_step(Step.SCRIPT_GENERATION, User(email="a", credits=0)), Step.IMAGE_GENERATOR)


class TestShortProject(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.accounts = AccountService(JsonStore(Path(self.tmp.name) / "store.json"))

    def tearDown(self):
        self.tmp.cleanup()

    def test_first_script_costs_one_credit(self):
        user = self.accounts.social_log_in("a@example.com")
        project = ShortProject()
        project.update_script(SCRIPT, self.accounts, user)
        self.assertEqual(user.credits, 2)
        project.update_script(SCRIPT.with_edits(hook="new hook"), self.accounts, user)
        self.assertEqual(user.credits, 2)
        self.assertEqual(project.script.hook, "new hook")
        self.assertEqual(project.script.estimated_duration, 2)

    def test_reset(self):
        project = ShortProject(script=SCRIPT, images=[GeneratedImage(url="u", prompt="p")])
        project.reset()
        self.assertIsNone(project.script)
        self.assertEqual(project.images, [])
        self.assertIsNone(project.voice)


if __name__ == "__main__":
    unittest.main()
