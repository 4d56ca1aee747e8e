"""HTTP client for the Papla Media text-to-speech API."""

import logging
import requests
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from papla.base import PaplaApiError, PaplaConfigurationError, PaplaResponseError
from papla.models import HistoryItem, Voice

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://papla.media"
API_KEY_HEADER = "papla-api-key"

T = TypeVar("T", Voice, HistoryItem)


class PaplaClient:
    """
    Single authenticated gateway to the Papla Media API.

    Every request carries the API key header. Any response outside the
    200-299 range raises PaplaApiError with the status code and raw body.
    Nothing is retried, batched or cached.

    The API key and base URL are fixed at construction, so one client can
    be shared between concurrent callers.
    """

    def __init__(self, api_key: str, base_url: str = DEFAULT_BASE_URL):
        """
        Initialize the client.

        Args:
            api_key: Papla API key (required)
            base_url: API root, without the /v1 prefix

        Raises:
            PaplaConfigurationError: If the API key or base URL is empty
        """
        if not api_key:
            raise PaplaConfigurationError(
                "Papla client requires an API key. "
                "Set PAPLA_API_KEY environment variable or pass api_key parameter."
            )
        if not base_url:
            raise PaplaConfigurationError("Papla client requires a base URL.")

        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    @property
    def api_key(self) -> str:
        """The key sent in the papla-api-key header of every request."""
        return self._api_key

    @property
    def base_url(self) -> str:
        """API root without a trailing slash; endpoints are appended to it."""
        return self._base_url

    def _request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Send a request and fail on any non-2xx status.

        Args:
            method: HTTP method
            endpoint: Path below the base URL, starting with /v1
            **kwargs: Passed through to requests (json, data, files)

        Returns:
            The successful response

        Raises:
            PaplaApiError: If the status is outside 200-299
        """
        headers = {API_KEY_HEADER: self._api_key}

        logger.debug("%s %s", method, endpoint)
        response = requests.request(
            method, f"{self._base_url}{endpoint}", headers=headers, **kwargs
        )

        if not 200 <= response.status_code < 300:
            logger.warning("%s %s failed with status %s", method, endpoint, response.status_code)
            raise PaplaApiError(response.status_code, response.text)

        return response

    @staticmethod
    def _json(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise PaplaResponseError(f"Response body is not valid JSON: {e}") from e

    @staticmethod
    def _collection(data: Union[Dict[str, Any], List[Any]], key: str, item_type: Type[T]) -> List[T]:
        """
        Decode a collection that is either a bare array or wrapped under key.

        Raises:
            PaplaResponseError: If neither shape matches
        """
        if isinstance(data, dict) and isinstance(data.get(key), list):
            items = data[key]
        elif isinstance(data, list):
            items = data
        else:
            raise PaplaResponseError(
                f"Expected a list or an object with a '{key}' list, got {type(data).__name__}"
            )
        return [item_type.from_dict(item) for item in items]

    # Text-to-speech

    def text_to_speech(self, voice_id: str, text: str) -> bytes:
        """
        Generate speech audio for text.

        Args:
            voice_id: Voice to synthesize with
            text: Text to speak

        Returns:
            Raw audio bytes (MP3)
        """
        response = self._request("POST", f"/v1/text-to-speech/{voice_id}", json={"text": text})
        return response.content

    # Voices

    def list_voices(self) -> List[Voice]:
        response = self._request("GET", "/v1/voices")
        return self._collection(self._json(response), "voices", Voice)

    def get_voice(self, voice_id: str) -> Voice:
        response = self._request("GET", f"/v1/voices/{voice_id}")
        return Voice.from_dict(self._json(response))

    def add_voice(self, name: str, audio_file_path: str, description: Optional[str] = None) -> Voice:
        """
        Clone a voice from an audio sample.

        The sample is uploaded as multipart form data under 'files'. Its
        minimum duration is checked by the server, not here.

        Args:
            name: Name for the new voice
            audio_file_path: Local path to the audio sample
            description: Optional description of the voice

        Returns:
            The created Voice

        Raises:
            OSError: If the sample cannot be read
            PaplaApiError: If the server rejects the upload
        """
        with open(audio_file_path, "rb") as f:
            audio_data = f.read()

        form = {"name": name}
        if description:
            form["description"] = description

        response = self._request(
            "POST",
            "/v1/voices/add",
            data=form,
            files={"files": ("audio.mp3", audio_data, "audio/mpeg")},
        )
        return Voice.from_dict(self._json(response))

    def edit_voice(
        self,
        voice_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None
    ) -> Voice:
        """
        Update a voice's name and/or description.

        Only fields that are not None are sent.
        """
        updates = {}
        if name is not None:
            updates["name"] = name
        if description is not None:
            updates["description"] = description

        response = self._request("POST", f"/v1/voices/{voice_id}/edit", json=updates)
        return Voice.from_dict(self._json(response))

    def delete_voice(self, voice_id: str) -> None:
        # The server refuses to delete premade voices
        self._request("DELETE", f"/v1/voices/{voice_id}")

    # History

    def list_history(self) -> List[HistoryItem]:
        response = self._request("GET", "/v1/history")
        return self._collection(self._json(response), "history", HistoryItem)

    def get_history(self, history_item_id: str) -> HistoryItem:
        response = self._request("GET", f"/v1/history/{history_item_id}")
        return HistoryItem.from_dict(self._json(response))

    def get_history_audio(self, history_item_id: str) -> bytes:
        response = self._request("GET", f"/v1/history/{history_item_id}/audio")
        return response.content

    def delete_history(self, history_item_id: str) -> None:
        self._request("DELETE", f"/v1/history/{history_item_id}")
