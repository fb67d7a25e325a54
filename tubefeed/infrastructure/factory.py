from typing import Optional

from tubefeed.application.extension import YouTubeAudioExtension
from tubefeed.application.safe import SafeExecutor
from tubefeed.crosscutting.config import Settings
from tubefeed.infrastructure.content.defaults import RemoteDefaultContent, StaticDefaultContent
from tubefeed.infrastructure.gateways.ytdlp import YtDlpGateway


def create_gateway(settings: Settings) -> YtDlpGateway:
    return YtDlpGateway(page_size=settings.page_size, socket_timeout=settings.socket_timeout)


def create_default_content(settings: Settings):
    """Remote browse content when a URL is configured, otherwise an empty page."""
    if settings.default_content_url:
        return RemoteDefaultContent(settings.default_content_url, timeout=settings.socket_timeout)
    return StaticDefaultContent()


def create_extension(settings: Settings, executor: Optional[SafeExecutor] = None) -> YouTubeAudioExtension:
    extension = YouTubeAudioExtension(
        gateway=create_gateway(settings),
        default_content=create_default_content(settings),
        settings=settings,
        executor=executor,
    )
    extension.initialize()
    return extension
