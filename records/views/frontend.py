"""Fallback route serving the browser client's ``index.html``."""
from django.conf import settings
from django.http import FileResponse, JsonResponse
from django.views.decorators.http import require_GET


@require_GET
def index(request):
    page = settings.FRONTEND_DIR / 'index.html'
    if not page.is_file():
        return JsonResponse({'success': False, 'msg': 'not found'}, status=404)
    return FileResponse(page.open('rb'), content_type='text/html; charset=utf-8')
