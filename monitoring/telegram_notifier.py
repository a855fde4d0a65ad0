"""
Telegram Notifier

Thin client for the three Telegram Bot API calls the relay needs:
sendMessage (instant alert), sendAudio (recording) and deleteMessage
(alert cleanup). Failures are logged and reported through the return
value; nothing here raises on an API or network error.
"""

import json
import logging
import requests

logger = logging.getLogger(__name__)

TELEGRAM_API = "https://api.telegram.org"
API_TIMEOUT = 30


def build_reply_markup(action_links):
    """Build an inline keyboard (one row of URL buttons) from (text, url) pairs."""
    if not action_links:
        return None
    return {
        "inline_keyboard": [
            [{"text": text, "url": url} for text, url in action_links]
        ]
    }


def _describe_error(e):
    response = getattr(e, "response", None)
    if response is not None:
        try:
            return response.json().get("description", response.text)
        except ValueError:
            return response.text
    return str(e)


class TelegramNotifier:
    """Sends and deletes messages in one Telegram chat."""

    def __init__(self, bot_token, chat_id, timeout=API_TIMEOUT, http=None):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.timeout = timeout
        self.http = http or requests

    def _url(self, method):
        return f"{TELEGRAM_API}/bot{self.bot_token}/{method}"

    def send_text(self, text, action_links=None):
        """
        Send a text message.

        Returns:
            int: Telegram message id, or None on failure
        """
        payload = {"chat_id": self.chat_id, "text": text}
        reply_markup = build_reply_markup(action_links)
        if reply_markup:
            payload["reply_markup"] = reply_markup

        try:
            resp = self.http.post(self._url("sendMessage"), json=payload, timeout=self.timeout)
            resp.raise_for_status()
            message_id = resp.json()["result"]["message_id"]
        except (requests.RequestException, ValueError, KeyError) as e:
            logger.error(f"❌ Failed to send message: {_describe_error(e)}")
            return None

        logger.debug(f"Message {message_id} sent")
        return message_id

    def send_audio(self, caption, file_path, action_links=None):
        """
        Upload an audio file with a caption.

        Returns:
            bool: True if Telegram accepted the upload
        """
        data = {"chat_id": self.chat_id, "caption": caption}
        reply_markup = build_reply_markup(action_links)
        if reply_markup:
            data["reply_markup"] = json.dumps(reply_markup)

        try:
            with open(file_path, "rb") as audio:
                resp = self.http.post(
                    self._url("sendAudio"),
                    data=data,
                    files={"audio": audio},
                    timeout=self.timeout,
                )
            resp.raise_for_status()
        except (requests.RequestException, OSError) as e:
            logger.error(f"❌ Failed to send audio file: {_describe_error(e)}")
            return False

        logger.info("✔️ Audio file sent to Telegram successfully.")
        return True

    def delete_message(self, message_id):
        """
        Delete a message by id.

        Returns:
            bool: True if the message was deleted
        """
        payload = {"chat_id": self.chat_id, "message_id": message_id}
        try:
            resp = self.http.post(self._url("deleteMessage"), json=payload, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"❌ Failed to delete message {message_id}: {_describe_error(e)}")
            return False

        logger.info(f"✅ Message {message_id} deleted successfully.")
        return True
