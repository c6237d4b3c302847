import logging

from src.app.services.tenancy import get_current_tenant_id

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(tenant)s]: %(message)s"


class TenantLogFilter(logging.Filter):
    """Stamps each record with the tenant whose database is active ("-" for central)"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.tenant = get_current_tenant_id() or "-"
        return True


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, TenantLogFilter) for f in handler.filters):
            handler.addFilter(TenantLogFilter())
