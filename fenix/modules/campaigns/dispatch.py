"""
Campaign Dispatch
=================

Sends a campaign's compiled template to every active subscriber in small
concurrent batches, then records the outcome on the campaign row.

The campaign row is written at most three times per dispatch: Sending when
delivery starts, then Sent or Draft when it ends, and Draft again if an
exception interrupts the run. A dispatch never returns with the campaign
left in Sending.

Collaborators are injectable for tests:
    store     - get_campaign(id), get_template(id), list_active_subscribers(),
                update_campaign(id, fields); defaults to the sqlite models
    transport - send(to=, subject=, html=) returning {'success', 'error'};
                defaults to the global email_service
"""

import asyncio
import inspect
import logging
from datetime import datetime, timezone
from types import SimpleNamespace

from flask import current_app

from fenix.core.config import Config
from fenix.modules.templates.renderer import render_email_html
from .personalize import personalize

logger = logging.getLogger(__name__)

BATCH_SIZE = 10
BATCH_DELAY = 1.0
MAX_ERRORS_IN_MESSAGE = 3

PREVIEW_RECIPIENT = {'name': 'John Doe', 'email': 'john@example.com'}


def _db_log(level, message, details=None):
    """Log to framework's persistent DB logger"""
    try:
        from fenix.core import db_log
        db_log(level, 'campaigns', message, details)
    except Exception as e:
        logger.debug(f"db_log unavailable: {e}")


def _setting(key, default):
    try:
        value = current_app.config.get(key)
        if value is not None:
            return value
    except RuntimeError:
        pass
    return getattr(Config, key, default)


def _default_store():
    from fenix.modules.subscribers.models import get_active_subscribers
    from fenix.modules.templates.models import get_template
    from .models import get_campaign, update_campaign

    return SimpleNamespace(
        get_campaign=get_campaign,
        get_template=get_template,
        list_active_subscribers=get_active_subscribers,
        update_campaign=update_campaign,
    )


def _default_transport():
    from fenix.modules.email import email_service
    return email_service


async def _call(func, *args, **kwargs):
    """Await coroutine functions, run blocking ones in a worker thread"""
    if inspect.iscoroutinefunction(func):
        return await func(*args, **kwargs)
    return await asyncio.to_thread(func, *args, **kwargs)


def _template_html(template):
    html = template.get('html_content')
    if html:
        return html
    from fenix.modules.templates.models import compile_template
    return compile_template(template.get('content') or [], template.get('name'))


def _failure(error, total=0, sent_count=0, errors=None):
    return {
        'success': False,
        'sent_count': sent_count,
        'total_subscribers': total,
        'errors': errors or None,
        'error': error,
    }


async def _deliver(transport, subscriber, subject, html, base_url):
    """Send one personalized copy. Returns (email, error); error is None on success."""
    email = subscriber.get('email', '')
    try:
        body = personalize(html, subscriber, base_url=base_url)
        result = await _call(transport.send, to=email, subject=subject, html=body)
        if isinstance(result, dict):
            if result.get('success'):
                return email, None
            return email, result.get('error') or 'Send failed'
        return email, None if result else 'Send failed'
    except Exception as e:
        logger.error(f"Failed to send to {email}: {e}")
        return email, str(e) or e.__class__.__name__


async def send_campaign(campaign_id, store=None, transport=None, batch_size=None,
                        batch_delay=None, base_url=None, sleep=asyncio.sleep):
    """Dispatch a campaign to all active subscribers.

    batch_size / batch_delay / base_url default to CAMPAIGN_BATCH_SIZE,
    CAMPAIGN_BATCH_DELAY and EMAIL_WEBSITE_URL from config.

    Returns {'success', 'sent_count', 'total_subscribers', 'errors', 'error'}
    where errors is a list of {'email', 'error'} or None.
    """
    store = store or _default_store()
    transport = transport or _default_transport()
    batch_size = max(1, int(batch_size or _setting('CAMPAIGN_BATCH_SIZE', BATCH_SIZE)))
    if batch_delay is None:
        batch_delay = float(_setting('CAMPAIGN_BATCH_DELAY', BATCH_DELAY))
    if base_url is None:
        base_url = _setting('EMAIL_WEBSITE_URL', '')

    sending_requested = False
    sent_count = 0
    errors = []
    total = 0

    try:
        campaign = await _call(store.get_campaign, campaign_id)
        if not campaign:
            return _failure('Campaign not found')

        template = await _call(store.get_template, campaign.get('template_id'))
        if not template:
            return _failure('Template not found')

        subscribers = list(await _call(store.list_active_subscribers) or [])
        total = len(subscribers)
        if not subscribers:
            return _failure('No active subscribers found')

        html = _template_html(template)
        subject = campaign.get('subject') or template.get('subject') or campaign.get('name', '')

        sending_requested = True
        await _call(store.update_campaign, campaign_id, {'status': 'Sending'})
        logger.info(f"Dispatching campaign {campaign_id} to {total} subscribers")

        for start in range(0, total, batch_size):
            if start:
                await sleep(batch_delay)
            batch = subscribers[start:start + batch_size]
            results = await asyncio.gather(
                *(_deliver(transport, s, subject, html, base_url) for s in batch)
            )
            for email, error in results:
                if error is None:
                    sent_count += 1
                else:
                    errors.append({'email': email, 'error': error})

        if sent_count > 0:
            await _call(store.update_campaign, campaign_id, {
                'status': 'Sent',
                'sent_at': datetime.now(timezone.utc).isoformat(),
                'sent_count': sent_count,
            })
            logger.info(f"Campaign {campaign_id} sent: {sent_count}/{total} delivered")
            _db_log('info', 'Campaign sent', {
                'campaign_id': campaign_id, 'sent': sent_count, 'failed': len(errors)
            })
            return {
                'success': True,
                'sent_count': sent_count,
                'total_subscribers': total,
                'errors': errors or None,
                'error': None,
            }

        await _call(store.update_campaign, campaign_id, {'status': 'Draft'})
        summary = ', '.join(f"{e['email']}: {e['error']}" for e in errors[:MAX_ERRORS_IN_MESSAGE])
        logger.error(f"Campaign {campaign_id} delivered to nobody: {summary}")
        _db_log('error', 'Campaign failed for all subscribers', {
            'campaign_id': campaign_id, 'failed': len(errors)
        })
        return _failure(f'Failed to send to all subscribers: {summary}', total, 0, errors)

    except Exception as e:
        logger.error(f"Error sending campaign {campaign_id}: {e}")
        _db_log('error', f'Error sending campaign {campaign_id}', {'error': str(e)})
        if sending_requested:
            try:
                await _call(store.update_campaign, campaign_id, {'status': 'Draft'})
            except Exception as revert_error:
                logger.error(f"Could not revert campaign {campaign_id} to Draft: {revert_error}")
                _db_log('error', f'Campaign {campaign_id} may be stuck in Sending',
                        {'error': str(revert_error)})
        return _failure('Failed to send campaign', total, sent_count, errors)


def preview_blocks(blocks, name, year=None, brand=None):
    """Compile blocks and fill placeholders with the sample recipient"""
    html = render_email_html(blocks, name, year=year, brand=brand)
    return personalize(html, PREVIEW_RECIPIENT, unsubscribe_url='#')


def preview_campaign(campaign_id, store=None):
    """Preview a stored campaign's template. Returns {'html', 'error'}."""
    store = store or _default_store()
    try:
        campaign = store.get_campaign(campaign_id)
        if not campaign:
            return {'html': None, 'error': 'Campaign not found'}

        template = store.get_template(campaign.get('template_id'))
        if not template:
            return {'html': None, 'error': 'Template not found'}

        html = personalize(_template_html(template), PREVIEW_RECIPIENT, unsubscribe_url='#')
        return {'html': html, 'error': None}

    except Exception as e:
        logger.error(f"Error previewing campaign {campaign_id}: {e}")
        _db_log('error', f'Error previewing campaign {campaign_id}', {'error': str(e)})
        return {'html': None, 'error': 'Failed to preview campaign'}
