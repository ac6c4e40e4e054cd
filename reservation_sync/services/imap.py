"""
IMAP message source for reservation-confirmation emails.
"""

import imaplib
from email import message_from_bytes
from email.header import decode_header as email_decode_header
from typing import Iterator

from reservation_sync.config import settings
from reservation_sync.core.logging import get_logger
from reservation_sync.core.models import CandidateMessage, MessageThread
from reservation_sync.services.base import MessageSource

log = get_logger(__name__)

SEEN = b"\\Seen"


class IMAPMessageSource(MessageSource):
    """Message source backed by an IMAP mailbox.

    Messages are fetched with BODY.PEEK so reading them never sets \\Seen;
    only mark_read() does.
    """

    def __init__(
        self,
        host: str | None = None,
        user: str | None = None,
        password: str | None = None,
        folder: str | None = None,
        port: int | None = None,
    ):
        self.host = host or settings.imap_host
        self.port = port or settings.imap_port
        self.user = user or settings.imap_user
        self.password = password or settings.imap_password
        self.folder = folder or settings.imap_folder
        self._conn: imaplib.IMAP4_SSL | None = None

    def connect(self) -> None:
        """Connect, authenticate and select the folder read-write."""
        log.info("imap_connecting", host=self.host, user=self.user)
        conn = None
        try:
            conn = imaplib.IMAP4_SSL(self.host, self.port)
            conn.login(self.user, self.password)
            typ, data = conn.select(self.folder)
            if typ != "OK":
                raise imaplib.IMAP4.error(f"Cannot select {self.folder}: {data}")
            self._conn = conn  # Only set if login and select succeed
            log.info("imap_connected", folder=self.folder)
        except Exception:
            # Clean up partial connection
            if conn:
                try:
                    conn.logout()
                except Exception:
                    pass
            raise

    def disconnect(self) -> None:
        """Close IMAP connection."""
        if self._conn:
            try:
                self._conn.logout()
            except Exception:
                pass
            self._conn = None
            log.info("imap_disconnected")

    def search(self, sender: str, subject: str) -> Iterator[MessageThread]:
        """
        Find unread messages from sender with subject, grouped into threads.

        IMAP FROM/SUBJECT search is substring matching; callers needing
        exact matches must filter the results.

        Yields:
            MessageThread objects
        """
        conn = self._require_connection()

        criteria = ["UNSEEN", "FROM", _quote(sender)]
        if subject.isascii():
            typ, data = conn.uid("SEARCH", *criteria, "SUBJECT", _quote(subject))
        else:
            # Non-ASCII search strings must be sent as a literal
            conn.literal = subject.encode("utf-8")
            typ, data = conn.uid("SEARCH", "CHARSET", "UTF-8", *criteria, "SUBJECT")
        if typ != "OK":
            raise imaplib.IMAP4.error(f"SEARCH failed: {data}")

        uids = [uid.decode() for uid in (data[0] or b"").split()]
        log.info("imap_search_complete", folder=self.folder, count=len(uids))

        threads: dict[str, MessageThread] = {}
        for uid in uids:
            message = self._fetch_message(uid)
            if message is None:
                continue
            thread = threads.setdefault(message.thread_id, MessageThread(thread_id=message.thread_id))
            thread.messages.append(message)

        yield from threads.values()

    def is_unread(self, message: CandidateMessage) -> bool:
        """Fetch the current flags; a vanished message counts as read."""
        conn = self._require_connection()
        typ, data = conn.uid("FETCH", message.uid, "(FLAGS)")
        if typ != "OK":
            raise imaplib.IMAP4.error(f"FETCH FLAGS failed for UID {message.uid}: {data}")
        if not data or data[0] is None:
            return False
        unread = SEEN not in imaplib.ParseFlags(_response_header(data))
        message.unread = unread
        return unread

    def mark_read(self, message: CandidateMessage) -> None:
        """Set the \\Seen flag on a message."""
        conn = self._require_connection()
        typ, data = conn.uid("STORE", message.uid, "+FLAGS", "(\\Seen)")
        if typ != "OK":
            raise imaplib.IMAP4.error(f"STORE failed for UID {message.uid}: {data}")
        message.unread = False
        log.info("imap_marked_read", uid=message.uid)

    def _require_connection(self) -> imaplib.IMAP4_SSL:
        if not self._conn:
            raise RuntimeError("Not connected to IMAP server")
        return self._conn

    def _fetch_message(self, uid: str) -> CandidateMessage | None:
        """Fetch one message without touching its \\Seen flag."""
        typ, msg_data = self._conn.uid("FETCH", uid, "(FLAGS BODY.PEEK[])")
        if typ != "OK" or not msg_data or msg_data[0] is None:
            log.warning("imap_fetch_empty", uid=uid)
            return None

        raw_email = b""
        for item in msg_data:
            if isinstance(item, tuple):
                raw_email = item[1]
                break
        flags = imaplib.ParseFlags(_response_header(msg_data))

        return self._parse_message(uid, message_from_bytes(raw_email), unread=SEEN not in flags)

    def _parse_message(self, uid: str, msg, unread: bool) -> CandidateMessage:
        """Parse an email.message.Message into a CandidateMessage."""
        message_id = (msg.get("Message-ID") or "").strip()
        body_plain, body_html = self._get_body(msg)

        return CandidateMessage(
            message_id=message_id,
            uid=uid,
            thread_id=_thread_root(msg) or message_id or uid,
            subject=self._decode_header(msg.get("Subject", "")),
            sender=self._decode_header(msg.get("From", "")),
            body_plain=body_plain,
            body_html=body_html,
            unread=unread,
        )

    def _decode_header(self, header: str) -> str:
        """Decode MIME-encoded header such as '=?ISO-2022-JP?B?...?='."""
        if not header:
            return ""
        decoded_parts = []
        for part, charset in email_decode_header(header):
            if isinstance(part, bytes):
                decoded_parts.append(part.decode(charset or "utf-8", errors="replace"))
            else:
                decoded_parts.append(part)
        return "".join(decoded_parts).replace("\r\n", "").replace("\n", "")

    def _get_body(self, msg) -> tuple[str, str]:
        """Extract plain text and HTML body from message."""
        text_plain = ""
        text_html = ""

        parts = msg.walk() if msg.is_multipart() else [msg]
        for part in parts:
            if "attachment" in part.get("Content-Disposition", ""):
                continue

            content_type = part.get_content_type()
            if content_type not in ("text/plain", "text/html"):
                continue

            payload = part.get_payload(decode=True)
            if not payload:
                continue

            text = _decode_payload(payload, part.get_content_charset())
            if content_type == "text/plain":
                text_plain += text
            else:
                text_html += text

        return text_plain, text_html


def _quote(value: str) -> str:
    """Quote a string for use as an IMAP search argument."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _response_header(data: list) -> bytes:
    """Join the non-literal parts of a FETCH response."""
    header = b""
    for item in data:
        if isinstance(item, tuple):
            header += item[0]
        elif isinstance(item, bytes):
            header += item
    return header


def _decode_payload(payload: bytes, charset: str | None) -> str:
    try:
        return payload.decode(charset or "utf-8", errors="replace")
    except LookupError:
        # Unknown charset label
        return payload.decode("utf-8", errors="replace")


def _thread_root(msg) -> str:
    """Message-ID of the first message in the conversation, if known."""
    references = (msg.get("References") or "").split()
    if references:
        return references[0]
    return (msg.get("In-Reply-To") or "").strip()
