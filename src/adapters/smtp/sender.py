"""
SMTP email sender adapter - Implements EmailSender protocol.

Delivers activation emails through an SMTP relay with optional STARTTLS
and login. Errors propagate to the caller; the domain notifier decides
that they never reach the user.
"""

import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

logger = logging.getLogger(__name__)

SUBJECT = "Activa tu cuenta - InfoVoto Perú"

TEXT_BODY = """Hola {name},

Para activar tu cuenta en InfoVoto y crear tu contraseña abre el siguiente enlace:

{url}

El enlace es válido por 24 horas. Si no solicitaste este registro, ignora este mensaje.
"""

HTML_BODY = """<!DOCTYPE html>
<html lang="es">
  <body>
    <p>Hola {name},</p>
    <p>Para activar tu cuenta en InfoVoto y crear tu contraseña haz clic en el siguiente enlace:</p>
    <p><a href="{url}">{url}</a></p>
    <p>El enlace es válido por 24 horas. Si no solicitaste este registro, ignora este mensaje.</p>
  </body>
</html>
"""


class SmtpEmailSender:
    """
    Implements EmailSender protocol via smtplib.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        host: str,
        port: int,
        from_email: str,
        from_name: str = "",
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.from_email = from_email
        self.from_name = from_name
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def build_message(self, email: str, name: str, activation_url: str) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["Subject"] = SUBJECT
        message["From"] = formataddr((self.from_name, self.from_email))
        message["To"] = email
        message.attach(MIMEText(TEXT_BODY.format(name=name, url=activation_url), "plain", "utf-8"))
        html_body = HTML_BODY.format(name=html.escape(name), url=html.escape(activation_url, quote=True))
        message.attach(MIMEText(html_body, "html", "utf-8"))
        return message

    def send_activation_email(self, email: str, name: str, activation_url: str) -> None:
        message = self.build_message(email, name, activation_url)
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.username:
                server.login(self.username, self.password or "")
            server.sendmail(self.from_email, [email], message.as_string())
        logger.debug("SMTP relay %s:%s accepted message for %s", self.host, self.port, email)
