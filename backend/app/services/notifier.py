"""
FormDrop Backend: Email Notifier
==================================

What:  Sends the confirmation email for a stored submission.
Why:   The submitter receives a copy of what they sent, images included.
How:   Loads every attachment referenced by the submission, composes a
       plain-text EmailMessage and hands it to the configured SMTP relay.
Who:   Called by SubmissionService after the submission was stored.
When:  Once per successful intake; at most one delivery attempt.

Delivery:
    smtplib is blocking, so the SMTP conversation runs in a worker thread
    (asyncio.to_thread). A slow relay delays only the request that waits
    for it.

Failure:
    Any relay error, unreadable attachment or unusable recipient address
    raises NotificationError.
    Nothing is retried, and the stored submission is left as it is.

Attachment loading:
    A reference whose URL path is under the public uploads prefix is read
    straight from the upload directory when the file is there. Every other
    reference is fetched over HTTP, exactly as a mail client would.
"""

import asyncio
import logging
import mimetypes
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from pathlib import PurePosixPath
from typing import Iterable, List, Optional, Protocol
from urllib.parse import unquote, urlsplit

import aiofiles
import httpx

from app.config import settings
from app.exceptions import NotificationError, ValidationError
from app.services.upload_service import UploadService, upload_service

logger = logging.getLogger(__name__)

BODY_TEMPLATE = (
    "A new user has submitted the form:\n"
    "Name: {name}\n"
    "Age: {age}\n"
    "Message: {message}\n"
    "Email: {email}\n"
)


class NotifiableSubmission(Protocol):
    name: str
    age: str
    message: str
    email: str
    images: List[str]


@dataclass(frozen=True)
class Attachment:
    filename: str
    content: bytes
    content_type: str

    @property
    def maintype(self) -> str:
        return self.content_type.split("/", 1)[0]

    @property
    def subtype(self) -> str:
        return self.content_type.split("/", 1)[1]


class AttachmentLoader:
    """Reads the bytes behind an attachment URL."""

    def __init__(self, uploads: Optional[UploadService] = None, http_timeout: float = 30.0):
        self.uploads = uploads or upload_service
        self.http_timeout = http_timeout

    def _local_name(self, path: str) -> Optional[str]:
        prefix = self.uploads.url_prefix + "/"
        if not path.startswith(prefix):
            return None
        return path[len(prefix):] or None

    async def load(self, reference: str) -> Attachment:
        """
        Raises:
            NotificationError if the file cannot be read or fetched.
        """
        path = unquote(urlsplit(reference).path)
        filename = PurePosixPath(path).name or "attachment"
        content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"

        local_name = self._local_name(path)
        if local_name is not None:
            try:
                local_path = self.uploads.resolve(local_name)
            except ValidationError:
                local_path = None
            if local_path is not None and local_path.is_file():
                try:
                    async with aiofiles.open(local_path, "rb") as f:
                        content = await f.read()
                except OSError as e:
                    raise NotificationError(
                        context={"attachment": reference, "os_error": str(e)},
                    )
                return Attachment(filename, content, content_type)

        try:
            async with httpx.AsyncClient(timeout=self.http_timeout) as client:
                response = await client.get(reference)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Could not fetch attachment %s: %s", reference, str(e))
            raise NotificationError(
                context={"attachment": reference, "error": str(e)},
            )
        return Attachment(filename, response.content, content_type)


class Notifier:
    """
    Composes and sends one email per submission.

    Built once per process from settings; every argument can be overridden
    (tests, alternative relays).
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        sender: Optional[str] = None,
        subject: Optional[str] = None,
        use_ssl: Optional[bool] = None,
        timeout: Optional[float] = None,
        loader: Optional[AttachmentLoader] = None,
    ):
        self.host = host or settings.smtp_host
        self.port = port or settings.smtp_port
        self.username = username if username is not None else settings.email_user
        self.password = password if password is not None else settings.email_pass
        self.sender = sender or settings.sender_address
        self.subject = subject or settings.mail_subject
        self.use_ssl = settings.smtp_use_ssl if use_ssl is None else use_ssl
        self.timeout = timeout or settings.smtp_timeout
        self.loader = loader or AttachmentLoader()

    def compose(
        self, submission: NotifiableSubmission, attachments: Iterable[Attachment]
    ) -> EmailMessage:
        """Build the message: four fields in the body, one part per image."""
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = submission.email
        message["Subject"] = self.subject
        message.set_content(
            BODY_TEMPLATE.format(
                name=submission.name,
                age=submission.age,
                message=submission.message,
                email=submission.email,
            )
        )
        for attachment in attachments:
            message.add_attachment(
                attachment.content,
                maintype=attachment.maintype,
                subtype=attachment.subtype,
                filename=attachment.filename,
            )
        return message

    def _deliver(self, message: EmailMessage) -> None:
        """Blocking SMTP conversation; runs in a worker thread."""
        context = ssl.create_default_context()
        if self.use_ssl:
            connection = smtplib.SMTP_SSL(
                self.host, self.port, timeout=self.timeout, context=context
            )
        else:
            connection = smtplib.SMTP(self.host, self.port, timeout=self.timeout)

        with connection as smtp:
            if not self.use_ssl:
                smtp.starttls(context=context)
            if self.username:
                smtp.login(self.username, self.password)
            smtp.send_message(message)

    async def notify(self, submission: NotifiableSubmission) -> None:
        """
        Send the confirmation email to submission.email.

        Raises:
            NotificationError on an unreadable attachment, an address that
            cannot be used as a header, or a relay failure.
        """
        attachments = []
        for reference in submission.images:
            attachments.append(await self.loader.load(reference))

        try:
            message = self.compose(submission, attachments)
        except ValueError as e:
            # e.g. CR/LF in the submitted address
            logger.error("Could not compose the notification: %s", str(e))
            raise NotificationError(context={"error_type": type(e).__name__})

        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                "Mail relay %s:%d refused the notification: %s",
                self.host,
                self.port,
                str(e),
            )
            raise NotificationError(
                context={"relay": f"{self.host}:{self.port}", "error_type": type(e).__name__},
            )

        logger.info("Notification sent with %d attachment(s)", len(attachments))


# Process-wide instance, handed out by get_notifier()
notifier = Notifier()


def get_notifier() -> Notifier:
    """FastAPI dependency returning the process-wide notifier."""
    return notifier
