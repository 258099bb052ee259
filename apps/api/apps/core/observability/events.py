"""
Domain events logging helpers.

Provides structured event logging for business operations.
"""
from typing import Dict, Optional

from .logging import get_sanitized_logger, sanitize_dict

logger = get_sanitized_logger(__name__)


def log_domain_event(
    event_name: str,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    entity_ids: Optional[Dict[str, str]] = None,
    result: str = 'success',
    **extra_fields
):
    """
    Log a domain event with structured data.

    Args:
        event_name: Name of the event (e.g., 'sale_recorded', 'price_corrected')
        entity_type: Type of entity (e.g., 'Sale', 'Product')
        entity_id: ID of primary entity
        entity_ids: Dictionary of related entity IDs
        result: Result of operation (success, failure, blocked, ...)
        **extra_fields: Additional fields to log (will be sanitized)

    Example:
        log_domain_event(
            'sale_recorded',
            entity_type='Sale',
            entity_id=str(sale.id),
            entity_ids={'product_id': str(sale.product_id)},
            sale_type='WHOLESALE',
            total_amount=330000
        )
    """
    event_data = {
        'event': event_name,
        'result': result,
    }

    if entity_type:
        event_data['entity_type'] = entity_type

    if entity_id:
        event_data['entity_id'] = entity_id

    if entity_ids:
        event_data.update(entity_ids)

    event_data.update(sanitize_dict(extra_fields))

    if result in ['failure', 'error']:
        logger.error(f'Domain event: {event_name}', extra=event_data)
    elif result in ['warning', 'blocked', 'conflict']:
        logger.warning(f'Domain event: {event_name}', extra=event_data)
    else:
        logger.info(f'Domain event: {event_name}', extra=event_data)


def log_consistency_checkpoint(
    checkpoint_name: str,
    entity_ids: Dict[str, str],
    checks_passed: Dict[str, bool],
    **extra_fields
):
    """
    Log a consistency checkpoint event.

    Used to verify data integrity at critical points, e.g. that a sale's
    stock deduction matches the sold quantity.
    """
    all_passed = all(checks_passed.values())

    event_data = {
        'event': 'consistency_checkpoint',
        'checkpoint': checkpoint_name,
        'status': 'passed' if all_passed else 'failed',
        'checks': checks_passed,
    }
    event_data.update(entity_ids)
    event_data.update(sanitize_dict(extra_fields))

    if all_passed:
        logger.info(f'Checkpoint passed: {checkpoint_name}', extra=event_data)
    else:
        logger.error(f'Checkpoint FAILED: {checkpoint_name}', extra=event_data)


def log_sale_recorded(sale, attempts=1, duration_ms=None):
    """Log a committed sale."""
    extra = {
        'sale_type': sale.sale_type,
        'quantity': sale.quantity,
        'unit_price': sale.unit_price,
        'total_amount': sale.total_amount,
        'attempts': attempts,
    }
    if duration_ms is not None:
        extra['duration_ms'] = duration_ms

    log_domain_event(
        'sale_recorded',
        entity_type='Sale',
        entity_id=str(sale.id),
        entity_ids={'product_id': str(sale.product_id), 'sold_by': sale.sold_by},
        **extra
    )


def log_sale_failed(product_id, error, attempts=1):
    """Log a sale that did not complete (any error kind)."""
    result = 'blocked' if error.error_type in ('insufficient_stock', 'not_found') else 'failure'
    log_domain_event(
        'sale_failed',
        entity_type='Product',
        entity_id=str(product_id),
        result=result,
        error_type=error.error_type,
        error_message=str(error)[:200],
        attempts=attempts,
    )


def log_stock_change(change):
    """Log an appended stock ledger entry."""
    log_domain_event(
        'stock_changed',
        entity_type='StockChange',
        entity_id=str(change.id),
        entity_ids={'product_id': str(change.product_id)},
        change_type=change.change_type,
        quantity=change.quantity,
        previous_qty=change.previous_qty,
        new_qty=change.new_qty,
        changed_by=change.changed_by,
    )


def log_price_corrected(correction):
    """Log a stored price corrected to the authoritative list."""
    log_domain_event(
        'price_corrected',
        entity_type='Product',
        entity_id=str(correction.product_id),
        sku=correction.sku,
        old_retail=correction.old_retail,
        new_retail=correction.new_retail,
        old_wholesale=correction.old_wholesale,
        new_wholesale=correction.new_wholesale,
    )
