import boto3
from botocore.exceptions import BotoCoreError, ClientError
from datetime import datetime
from planner.config import settings
from planner.log import get_logger

log = get_logger(__name__)

CHARSET = "UTF-8"

EMAIL_CSS_STYLES = """
    body {
        font-family: Arial, sans-serif;
        background-color: #f9f9f9;
        color: #333;
        padding: 20px;
    }
    .container {
        max-width: 600px;
        margin: 0 auto;
        background-color: #ffffff;
        border-radius: 8px;
        padding: 30px;
    }
    .footer {
        margin-top: 30px;
        font-size: 14px;
        color: #777;
    }
"""


def _get_ses_client():
    """Create and return an AWS SES client."""
    return boto3.client(
        "ses",
        region_name=settings.AWS_REGION,
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
    )


def _send_email(email: str, subject: str, body_html: str) -> bool:
    """
    Send an email using AWS SES.

    Args:
        email: Recipient email address
        subject: Email subject
        body_html: HTML body content

    Returns:
        bool: True if email sent successfully, False otherwise
    """
    try:
        client = _get_ses_client()
        client.send_email(
            Destination={"ToAddresses": [email]},
            Message={
                "Body": {"Html": {"Charset": CHARSET, "Data": body_html}},
                "Subject": {"Charset": CHARSET, "Data": subject},
            },
            Source=settings.SES_SENDER,
        )
        log.info("Email sent to %s - Subject: %s", email, subject)
        return True
    except ClientError as e:
        log.error("Email failed to %s - Subject: %s - Error: %s", email, subject, e.response["Error"]["Message"])
        return False
    except BotoCoreError as e:
        log.error("Email failed to %s - Subject: %s - Error: %s", email, subject, e)
        return False


def _create_password_reset_template(first_name: str, reset_url: str) -> str:
    current_year = datetime.now().year
    return f"""\
<html>
  <head>
    <style>
{EMAIL_CSS_STYLES}
    </style>
  </head>
  <body>
    <div class="container">
      <h1>Restablecimiento de contraseña</h1>
      <p>Hola {first_name}, recibimos una solicitud para restablecer tu contraseña.</p>
      <a href="{reset_url}" style="display:inline-block;margin-top:16px;padding:12px 24px;background:#2a7ae2;color:#fff;border-radius:6px;text-decoration:none;">Restablecer contraseña</a>
      <p>Si el botón no funciona, copia y pega esta URL en tu navegador:</p>
      <p><a href="{reset_url}">{reset_url}</a></p>
      <p>El enlace caduca en {settings.PASSWORD_RESET_EXPIRE_MINUTES} minutos. Si no solicitaste el cambio, ignora este correo.</p>
      <div class="footer">
        <p>&copy; {current_year} {settings.PROJECT_NAME}</p>
      </div>
    </div>
  </body>
</html>
"""


def send_password_reset_email(email: str, first_name: str, token: str) -> bool:
    reset_url = f"{settings.FRONTEND_URL}/reset-password/{token}"
    body = _create_password_reset_template(first_name, reset_url)
    return _send_email(email, "Restablecimiento de contraseña", body)
