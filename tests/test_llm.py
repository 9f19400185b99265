import unittest
from unittest.mock import patch, MagicMock

from assistant.llm import GeminiSummarizer
from errors import ConfigurationError, SummarizerError


class TestGeminiSummarizer(unittest.TestCase):
    def test_missing_key_is_configuration_error(self):
        with self.assertRaises(ConfigurationError):
            GeminiSummarizer('')

    @patch('assistant.llm.genai')
    def test_generate_returns_stripped_text(self, genai):
        model = MagicMock()
        model.generate_content.return_value.text = '  Mike is fixing TS-102.\n'
        genai.GenerativeModel.return_value = model
        summarizer = GeminiSummarizer('key', model='gemini-test', max_tokens=256)
        self.assertEqual(summarizer.generate('prompt'), 'Mike is fixing TS-102.')
        genai.configure.assert_called_once_with(api_key='key')
        genai.GenerativeModel.assert_called_once_with(model_name='gemini-test')
        kwargs = model.generate_content.call_args.kwargs
        self.assertEqual(kwargs['generation_config'], {'max_output_tokens': 256})

    @patch('assistant.llm.genai')
    def test_sdk_failure_becomes_summarizer_error(self, genai):
        genai.GenerativeModel.return_value.generate_content.side_effect = ValueError('quota exhausted')
        with self.assertRaises(SummarizerError) as ctx:
            GeminiSummarizer('key').generate('prompt')
        self.assertIn('quota exhausted', str(ctx.exception))

    @patch('assistant.llm.genai')
    def test_empty_reply_is_an_error(self, genai):
        genai.GenerativeModel.return_value.generate_content.return_value.text = ''
        with self.assertRaises(SummarizerError):
            GeminiSummarizer('key').generate('prompt')


if __name__ == '__main__':
    unittest.main()
