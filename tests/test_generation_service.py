"""
Tests for generation_service: duration/scene-count rules, response parsing and the
four backend operations. llm_utils calls are mocked.
"""

import json
import base64
import unittest
import sys
from pathlib import Path
from unittest.mock import patch, AsyncMock

sys.path.insert(0, str(Path(__file__).parent.parent))

import generation_service
from llm_utils import MalformedResponseError, TransientGenerationError
from schemas import SCENE_PROMPTS_SCHEMA, SCRIPT_SCHEMA
from shorts_types import ScriptData


def make_script(duration: int = 30) -> ScriptData:
    return ScriptData(
        hook="Stop waiting for motivation.",
        main_content="Discipline is doing it anyway.",
        ending="Start now.",
        keywords=["motivation"],
        estimated_duration=duration,
    )


class TestDurationRules(unittest.TestCase):

    def test_estimate_duration_rounds_up(self):
        self.assertEqual(generation_service.estimate_duration("one two three four five"), 2)
        self.assertEqual(generation_service.estimate_duration(" ".join(["w"] * 10)), 4)
        self.assertEqual(generation_service.estimate_duration(" ".join(["w"] * 11)), 5)

    def test_estimate_duration_ignores_extra_whitespace(self):
        self.assertEqual(generation_service.estimate_duration("  one\n\ntwo\tthree  "), 2)
        self.assertEqual(generation_service.estimate_duration(""), 0)

    def test_recommended_scene_count_thresholds(self):
        for duration in (0, 1, 10, 19):
            self.assertEqual(generation_service.recommended_scene_count(duration), 8)
        for duration in (20, 30, 45):
            self.assertEqual(generation_service.recommended_scene_count(duration), 9)
        for duration in (46, 60, 120):
            self.assertEqual(generation_service.recommended_scene_count(duration), 10)

    def test_narration_text(self):
        script = make_script()
        self.assertEqual(
            generation_service.narration_text(script),
            "Stop waiting for motivation. . Discipline is doing it anyway. . Start now.",
        )


class TestParsing(unittest.TestCase):

    def test_parse_script_computes_duration(self):
        text = json.dumps({
            "hook": "one two three",
            "mainContent": "four five six seven",
            "ending": "eight nine ten",
            "keywords": ["a", "b"],
        })
        script = generation_service.parse_script(text)
        self.assertEqual(script.hook, "one two three")
        self.assertEqual(script.main_content, "four five six seven")
        self.assertEqual(script.keywords, ["a", "b"])
        self.assertEqual(script.estimated_duration, 4)  # ceil(10 / 2.5)

    def test_parse_script_accepts_code_fence(self):
        text = '```json\n{"hook": "a", "mainContent": "b", "ending": "c", "keywords": []}\n```'
        self.assertEqual(generation_service.parse_script(text).estimated_duration, 2)

    def test_parse_script_rejects_bad_payloads(self):
        for text in ("not json", "[]", '{"hook": "a", "ending": "c"}', '{"hook": "a", "mainContent": "b", "ending": "c", "keywords": "x"}'):
            with self.assertRaises(MalformedResponseError):
                generation_service.parse_script(text)

    def test_parse_scene_prompts(self):
        self.assertEqual(generation_service.parse_scene_prompts('["a", "b"]'), ["a", "b"])
        for text in ('{"a": 1}', "[1, 2]", "nope"):
            with self.assertRaises(MalformedResponseError):
                generation_service.parse_scene_prompts(text)


@patch("retry_utils.asyncio.sleep", new_callable=AsyncMock)
class TestGenerateScript(unittest.IsolatedAsyncioTestCase):

    async def test_generate_script(self, mock_sleep):
        payload = json.dumps({
            "hook": "Stop waiting.", "mainContent": "Act today.", "ending": "Go.", "keywords": ["grind"],
        })
        with patch("generation_service.llm_utils.generate_text", new=AsyncMock(return_value=payload)) as mock_text:
            script = await generation_service.generate_script("Motivation")
        self.assertEqual(script.hook, "Stop waiting.")
        self.assertEqual(script.estimated_duration, 2)
        prompt = mock_text.call_args.args[0]
        self.assertIn("Motivation", prompt)
        self.assertIs(mock_text.call_args.kwargs["response_json_schema"], SCRIPT_SCHEMA)

    async def test_malformed_script_is_not_retried(self, mock_sleep):
        with patch("generation_service.llm_utils.generate_text", new=AsyncMock(return_value="oops")) as mock_text:
            with self.assertRaises(MalformedResponseError):
                await generation_service.generate_script("Motivation")
        self.assertEqual(mock_text.await_count, 1)

    async def test_empty_niche_makes_no_request(self, mock_sleep):
        with patch("generation_service.llm_utils.generate_text", new=AsyncMock()) as mock_text:
            with self.assertRaises(ValueError):
                await generation_service.generate_script("  ")
        mock_text.assert_not_awaited()


@patch("retry_utils.asyncio.sleep", new_callable=AsyncMock)
class TestGenerateScenePrompts(unittest.IsolatedAsyncioTestCase):

    async def test_requests_recommended_count(self, mock_sleep):
        prompts = [f"scene {i}" for i in range(10)]
        with patch("generation_service.llm_utils.generate_text",
                   new=AsyncMock(return_value=json.dumps(prompts))) as mock_text:
            result = await generation_service.generate_scene_prompts(make_script(duration=50))
        self.assertEqual(result, prompts)
        self.assertIn("EXACTLY 10", mock_text.call_args.args[0])
        self.assertIs(mock_text.call_args.kwargs["response_json_schema"], SCENE_PROMPTS_SCHEMA)

    async def test_transient_failure_is_retried(self, mock_sleep):
        with patch("generation_service.llm_utils.generate_text",
                   new=AsyncMock(side_effect=[TransientGenerationError("503"), '["a"]'])) as mock_text:
            result = await generation_service.generate_scene_prompts(make_script())
        self.assertEqual(result, ["a"])
        self.assertEqual(mock_text.await_count, 2)

    async def test_missing_script_makes_no_request(self, mock_sleep):
        with patch("generation_service.llm_utils.generate_text", new=AsyncMock()) as mock_text:
            with self.assertRaises(ValueError):
                await generation_service.generate_scene_prompts(None)
        mock_text.assert_not_awaited()


@patch("retry_utils.asyncio.sleep", new_callable=AsyncMock)
class TestGenerateImage(unittest.IsolatedAsyncioTestCase):

    async def test_returns_data_uri(self, mock_sleep):
        with patch("generation_service.llm_utils.generate_image",
                   new=AsyncMock(return_value=(b"img", "image/png"))) as mock_image:
            url = await generation_service.generate_image("a runner at dawn", "Neon")
        self.assertEqual(url, "data:image/png;base64," + base64.b64encode(b"img").decode())
        prompt = mock_image.call_args.args[0]
        self.assertTrue(prompt.startswith("Neon style photo: a runner at dawn."))
        self.assertIn("NO LOGOS", prompt)
        self.assertEqual(mock_image.call_args.kwargs["aspect_ratio"], "9:16")

    async def test_retries_then_succeeds(self, mock_sleep):
        side_effect = [TransientGenerationError("500"), TransientGenerationError("500"), (b"img", "image/png")]
        with patch("generation_service.llm_utils.generate_image", new=AsyncMock(side_effect=side_effect)) as mock_image:
            url = await generation_service.generate_image("a runner", "Cinematic")
        self.assertTrue(url.startswith("data:image/png;base64,"))
        self.assertEqual(mock_image.await_count, 3)

    async def test_missing_image_fails_immediately(self, mock_sleep):
        with patch("generation_service.llm_utils.generate_image",
                   new=AsyncMock(side_effect=MalformedResponseError("No image data returned from Gemini"))) as mock_image:
            with self.assertRaises(MalformedResponseError):
                await generation_service.generate_image("a runner", "Cinematic")
        self.assertEqual(mock_image.await_count, 1)

    async def test_empty_prompt_makes_no_request(self, mock_sleep):
        with patch("generation_service.llm_utils.generate_image", new=AsyncMock()) as mock_image:
            with self.assertRaises(ValueError):
                await generation_service.generate_image("", "Cinematic")
        mock_image.assert_not_awaited()


@patch("retry_utils.asyncio.sleep", new_callable=AsyncMock)
class TestSpeech(unittest.IsolatedAsyncioTestCase):

    async def test_generate_speech_returns_base64(self, mock_sleep):
        with patch("generation_service.llm_utils.generate_speech",
                   new=AsyncMock(return_value=b"\x00\x40")) as mock_speech:
            audio = await generation_service.generate_speech("Hello", "Puck")
        self.assertEqual(base64.b64decode(audio), b"\x00\x40")
        mock_speech.assert_awaited_once_with("Hello", "Puck")

    async def test_generate_voice_measures_duration(self, mock_sleep):
        pcm = b"\x00\x00" * 36000  # 1.5s at 24kHz mono
        with patch("generation_service.llm_utils.generate_speech", new=AsyncMock(return_value=pcm)) as mock_speech:
            voice = await generation_service.generate_voice(make_script(), "Kore")
        self.assertAlmostEqual(voice.duration, 1.5)
        self.assertEqual(voice.voice_name, "Kore (Energetic)")
        self.assertEqual(voice.speed, 1.0)
        self.assertEqual(base64.b64decode(voice.audio_url), pcm)
        self.assertEqual(mock_speech.call_args.args[0], generation_service.narration_text(make_script()))


if __name__ == "__main__":
    unittest.main()
