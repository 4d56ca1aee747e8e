"""Tests for the tool registry and the Papla tools."""

import json
import os
import re
import pytest
from unittest.mock import Mock, patch

from papla import (
    FileOutputError,
    HistoryItem,
    PaplaApiError,
    PaplaClient,
    PaplaResponseError,
    ServerConfig,
    Voice,
    create_tool_registry,
)
from papla.tools import (
    ToolArgumentError,
    ToolNotFoundError,
    ToolParam,
    ToolRegistry,
    error_envelope,
    text_envelope,
)


def payload(envelope):
    """Decode the JSON text block of an envelope."""
    assert len(envelope["content"]) == 1
    assert envelope["content"][0]["type"] == "text"
    return json.loads(envelope["content"][0]["text"])


@pytest.fixture
def config(tmp_path):
    return ServerConfig(api_key='test-key', output_dir=str(tmp_path / 'audio'), api_base_url='https://api.test')


@pytest.fixture
def client():
    return Mock(spec=PaplaClient)


@pytest.fixture
def registry(client, config):
    return create_tool_registry(client, config)


class TestToolRegistry:
    """Test ToolRegistry registration and validation."""

    def test_all_tools_registered(self, registry):
        assert sorted(registry.list_tools()) == sorted([
            'papla_tts',
            'papla_list_voices',
            'papla_get_voice',
            'papla_add_voice',
            'papla_edit_voice',
            'papla_delete_voice',
            'papla_list_history',
            'papla_get_history',
            'papla_download_history_audio',
            'papla_delete_history',
        ])

    def test_register_duplicate_tool(self):
        """Test registering a duplicate tool raises error."""
        registry = ToolRegistry()
        registry.register('echo', 'Echo', lambda: {})

        with pytest.raises(ValueError, match="already registered"):
            registry.register('echo', 'Echo again', lambda: {})

    def test_unknown_tool(self, registry):
        with pytest.raises(ToolNotFoundError, match="not registered"):
            registry.call('papla_sing', {})

    def test_missing_required_argument(self, registry, client):
        with pytest.raises(ToolArgumentError, match="voice_id"):
            registry.call('papla_tts', {'text': 'Hello'})

        client.text_to_speech.assert_not_called()

    def test_unknown_argument(self, registry):
        with pytest.raises(ToolArgumentError, match="Unknown argument"):
            registry.call('papla_get_voice', {'voice_id': 'v1', 'speed': '2'})

    def test_non_string_argument(self, registry):
        with pytest.raises(ToolArgumentError, match="must be a string"):
            registry.call('papla_get_voice', {'voice_id': 42})

    @pytest.mark.parametrize("text", ["", "x" * 5001])
    def test_text_length_bounds(self, registry, client, text):
        """Test text must be 1-5000 characters."""
        with pytest.raises(ToolArgumentError, match="characters"):
            registry.call('papla_tts', {'text': text, 'voice_id': 'v1'})

        client.text_to_speech.assert_not_called()

    def test_text_at_max_length(self, registry, client):
        client.text_to_speech.return_value = b'audio'

        envelope = registry.call('papla_tts', {'text': 'x' * 5000, 'voice_id': 'v1'})

        assert payload(envelope)['text_length'] == 5000

    def test_describe(self, registry):
        """Test tool descriptions expose a JSON schema."""
        tts = next(tool for tool in registry.describe() if tool['name'] == 'papla_tts')

        assert tts['inputSchema']['required'] == ['text', 'voice_id']
        assert tts['inputSchema']['properties']['text']['maxLength'] == 5000
        assert 'output_path' in tts['inputSchema']['properties']

    def test_unexpected_errors_propagate(self, registry, client):
        """Test errors outside the normalized taxonomy are not turned into envelopes."""
        client.list_voices.side_effect = PaplaResponseError("bad shape")

        with pytest.raises(PaplaResponseError):
            registry.call('papla_list_voices')

    def test_decorator_registration(self):
        registry = ToolRegistry()

        @registry.tool('shout', 'Upper-case text', [ToolParam('text', 'Text')])
        def shout(text):
            return {'text': text.upper()}

        assert payload(registry.call('shout', {'text': 'hi'})) == {'text': 'HI'}


class TestEnvelopes:
    """Test envelope rendering."""

    def test_text_envelope(self):
        envelope = text_envelope({'a': 1})
        assert 'isError' not in envelope
        assert envelope['content'][0]['text'] == json.dumps({'a': 1}, indent=2)

    def test_api_error_envelope(self):
        envelope = error_envelope(PaplaApiError(404, 'not found'))

        assert envelope['isError'] is True
        assert payload(envelope) == {
            'success': False,
            'error': 'Papla API error (404): not found',
            'code': 404,
        }

    def test_file_error_envelope(self):
        envelope = error_envelope(FileOutputError('/x/out.mp3', OSError('disk full')))

        assert envelope['isError'] is True
        assert payload(envelope)['path'] == '/x/out.mp3'


class TestTextToSpeechTool:
    """Test papla_tts."""

    def test_generates_file_in_output_dir(self, registry, client, config):
        """Test synthesis without an explicit path writes <output_dir>/tts-<timestamp>.mp3."""
        client.text_to_speech.return_value = b'\x00\x01binary audio'

        envelope = registry.call('papla_tts', {'text': 'Hello world', 'voice_id': 'voice-123'})

        result = payload(envelope)
        assert 'isError' not in envelope
        assert result['success'] is True
        assert result['voice_id'] == 'voice-123'
        assert result['text_length'] == 11
        assert os.path.dirname(result['file_path']) == config.output_dir
        assert re.fullmatch(r"tts-\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}\.mp3", os.path.basename(result['file_path']))
        with open(result['file_path'], 'rb') as f:
            assert f.read() == b'\x00\x01binary audio'
        client.text_to_speech.assert_called_once_with('voice-123', 'Hello world')

    def test_explicit_output_path(self, registry, client, tmp_path):
        client.text_to_speech.return_value = b'audio'
        target = str(tmp_path / 'custom' / 'greeting.mp3')

        result = payload(registry.call('papla_tts', {'text': 'Hi', 'voice_id': 'v1', 'output_path': target}))

        assert result['file_path'] == target
        assert os.path.exists(target)

    def test_api_error(self, registry, client, config):
        """Test API failures become error envelopes and nothing is written."""
        client.text_to_speech.side_effect = PaplaApiError(401, '{"error":"invalid key"}')

        envelope = registry.call('papla_tts', {'text': 'Hi', 'voice_id': 'v1'})

        assert envelope['isError'] is True
        assert payload(envelope)['code'] == 401
        assert not os.path.exists(config.output_dir)

    def test_write_failure(self, registry, client, tmp_path):
        """Test file write failures become error envelopes with the path."""
        client.text_to_speech.return_value = b'audio'
        blocker = tmp_path / 'blocker'
        blocker.write_text('file')
        target = str(blocker / 'out.mp3')

        envelope = registry.call('papla_tts', {'text': 'Hi', 'voice_id': 'v1', 'output_path': target})

        assert envelope['isError'] is True
        assert payload(envelope)['path'] == target


class TestVoiceTools:
    """Test the voice tools."""

    def test_list_voices(self, registry, client):
        client.list_voices.return_value = [
            Voice('v1', 'Alice', category='premade'),
            Voice('v2', 'Bob', category='cloned'),
        ]

        result = payload(registry.call('papla_list_voices'))

        assert result['total'] == 2
        assert result['voices'][1] == {'voice_id': 'v2', 'name': 'Bob', 'category': 'cloned'}

    def test_get_voice(self, registry, client):
        client.get_voice.return_value = Voice('v1', 'Alice')

        result = payload(registry.call('papla_get_voice', {'voice_id': 'v1'}))

        assert result == {'voice': {'voice_id': 'v1', 'name': 'Alice'}}

    def test_add_voice(self, registry, client):
        client.add_voice.return_value = Voice('clone-1', 'Me', category='cloned')

        result = payload(registry.call('papla_add_voice', {
            'name': 'Me',
            'audio_file_path': '/samples/me.mp3',
        }))

        assert result['success'] is True
        assert result['voice']['voice_id'] == 'clone-1'
        client.add_voice.assert_called_once_with('Me', '/samples/me.mp3', None)

    def test_add_voice_empty_name(self, registry):
        with pytest.raises(ToolArgumentError):
            registry.call('papla_add_voice', {'name': '', 'audio_file_path': '/samples/me.mp3'})

    def test_edit_voice_drops_empty_fields(self, registry, client):
        """Test empty strings are not sent as updates."""
        client.edit_voice.return_value = Voice('v1', 'Alice')

        registry.call('papla_edit_voice', {'voice_id': 'v1', 'name': '', 'description': 'Warm'})

        client.edit_voice.assert_called_once_with('v1', name=None, description='Warm')

    def test_delete_premade_voice(self, registry, client):
        """Test a refused deletion surfaces the provider's status and body."""
        body = '{"error":"cannot delete premade voice"}'
        client.delete_voice.side_effect = PaplaApiError(403, body)

        envelope = registry.call('papla_delete_voice', {'voice_id': 'premade-1'})

        assert envelope['isError'] is True
        assert payload(envelope) == {
            'success': False,
            'error': f'Papla API error (403): {body}',
            'code': 403,
        }

    def test_delete_voice(self, registry, client):
        result = payload(registry.call('papla_delete_voice', {'voice_id': 'clone-1'}))

        assert result == {'success': True, 'voice_id': 'clone-1'}


class TestHistoryTools:
    """Test the history tools."""

    def test_list_history(self, registry, client):
        client.list_history.return_value = [HistoryItem('h1', 'v1', 'Hello')]

        result = payload(registry.call('papla_list_history'))

        assert result == {
            'items': [{'history_item_id': 'h1', 'voice_id': 'v1', 'text': 'Hello'}],
            'total': 1,
        }

    def test_get_history(self, registry, client):
        client.get_history.return_value = HistoryItem('h1', 'v1', 'Hello', character_count=5)

        result = payload(registry.call('papla_get_history', {'history_item_id': 'h1'}))

        assert result['item']['character_count'] == 5

    def test_download_to_explicit_path(self, registry, client, tmp_path):
        """Test history audio lands at exactly the explicit path."""
        client.get_history_audio.return_value = b'history audio H'
        target = str(tmp_path / 'out.mp3')

        result = payload(registry.call('papla_download_history_audio', {
            'history_item_id': 'hist-9',
            'output_path': target,
        }))

        assert result == {'success': True, 'file_path': target, 'history_item_id': 'hist-9'}
        with open(target, 'rb') as f:
            assert f.read() == b'history audio H'

    def test_download_auto_path(self, registry, client, config):
        client.get_history_audio.return_value = b'audio'

        result = payload(registry.call('papla_download_history_audio', {'history_item_id': 'hist-9'}))

        assert os.path.basename(result['file_path']).startswith('history-')
        assert os.path.dirname(result['file_path']) == config.output_dir

    def test_delete_history(self, registry, client):
        result = payload(registry.call('papla_delete_history', {'history_item_id': 'h1'}))

        assert result == {'success': True, 'history_item_id': 'h1'}
        client.delete_history.assert_called_once_with('h1')


class TestEndToEnd:
    """Test tools against a mocked HTTP layer."""

    @patch('requests.request')
    def test_synthesize_writes_response_bytes(self, mock_request, config):
        response = Mock(status_code=200, content=b'B-audio-bytes')
        mock_request.return_value = response
        registry = create_tool_registry(PaplaClient('test-key', 'https://api.test'), config)

        result = payload(registry.call('papla_tts', {'text': 'Hello world', 'voice_id': 'voice-123'}))

        with open(result['file_path'], 'rb') as f:
            assert f.read() == b'B-audio-bytes'
        assert mock_request.call_args[0] == ('POST', 'https://api.test/v1/text-to-speech/voice-123')

    @patch('requests.request')
    def test_history_audio_to_explicit_path(self, mock_request, config, tmp_path):
        mock_request.return_value = Mock(status_code=200, content=b'H-audio')
        registry = create_tool_registry(PaplaClient('test-key', 'https://api.test'), config)
        target = str(tmp_path / 'tmp' / 'out.mp3')

        result = payload(registry.call('papla_download_history_audio', {
            'history_item_id': 'hist-9',
            'output_path': target,
        }))

        assert result['file_path'] == target
        with open(target, 'rb') as f:
            assert f.read() == b'H-audio'

    @patch('requests.request')
    def test_premade_delete_403(self, mock_request, config):
        body = '{"error":"cannot delete premade voice"}'
        mock_request.return_value = Mock(status_code=403, text=body)
        registry = create_tool_registry(PaplaClient('test-key', 'https://api.test'), config)

        envelope = registry.call('papla_delete_voice', {'voice_id': 'premade-1'})

        assert envelope['isError'] is True
        assert payload(envelope)['code'] == 403

    @patch('requests.request')
    def test_get_voice_passes_server_fields_through(self, mock_request, config):
        """Test fields the model does not name reach the tool result."""
        voice = {'voice_id': 'v1', 'name': 'Alice', 'settings': {'stability': 0.5}}
        mock_request.return_value = Mock(status_code=200, json=Mock(return_value=voice))
        registry = create_tool_registry(PaplaClient('test-key', 'https://api.test'), config)

        result = payload(registry.call('papla_get_voice', {'voice_id': 'v1'}))

        assert result == {'voice': voice}

    @patch('requests.request')
    def test_list_history_with_sparse_items(self, mock_request, config):
        """Test items carrying only their identifiers are still listed."""
        history = {'history': [
            {'history_item_id': 'h1', 'voice_id': 'v1'},
            {'history_item_id': 'h2', 'voice_id': 'v1', 'text': 'Hi'},
        ]}
        mock_request.return_value = Mock(status_code=200, json=Mock(return_value=history))
        registry = create_tool_registry(PaplaClient('test-key', 'https://api.test'), config)

        envelope = registry.call('papla_list_history')

        assert 'isError' not in envelope
        assert payload(envelope) == {'items': history['history'], 'total': 2}


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
