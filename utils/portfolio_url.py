from core.routing import RoutingConfig


def portfolio_url(username: str, config: RoutingConfig) -> str:
    """
    https://username.<base-domain> в проде,
    /username при локальной разработке.
    """
    if not username:
        return ""
    clean = username.strip().lower()
    if config.local_development:
        return f"/{clean}"
    return f"https://{clean}.{config.base_domain}"


def portfolio_display_url(username: str, config: RoutingConfig) -> str:
    if not username:
        return ""
    clean = username.strip().lower()
    if config.local_development:
        return f"{clean}.localhost"
    return f"{clean}.{config.base_domain}"
