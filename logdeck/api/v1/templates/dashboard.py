# Path: logdeck/api/v1/templates/dashboard.py
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from logdeck.shared.config.settings import LogManagerConfig

TEMPLATE_DIR = Path(__file__).parent

environment = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html", "xml"])
)


def render_dashboard(config: LogManagerConfig) -> str:
    """Dashboard page with the enabled features switched on."""
    server = config.server_config
    features = {
        "realtime": server.enable_realtime,
        "search": server.enable_search,
        "charts": server.enable_charts,
        "metrics": config.metrics_endpoint_enabled
    }
    return environment.get_template("dashboard.html").render(features=features, levels=config.levels)
