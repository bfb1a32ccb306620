import logging

from django.conf import settings
from django.http import JsonResponse

from ..exceptions import StoreUnavailable
from ..store import get_store

logger = logging.getLogger(__name__)


def health(request):
    return JsonResponse({'status': 'ok', 'service': settings.SERVICE_NAME})


def healthz(request):
    """Readiness: the service is only useful while Redis answers."""
    store = get_store()
    try:
        store.ping()
        length = store.queue_length()
    except StoreUnavailable as e:
        logger.warning('Readiness check failed: %s', e.__cause__ or e)
        return JsonResponse({'ok': False, 'error': str(e.__cause__ or e)}, status=503)
    return JsonResponse({'ok': True, 'redis': True, 'queueLength': length})
