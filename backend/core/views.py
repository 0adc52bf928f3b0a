from django.shortcuts import render

def error_404(request, exception, template_name="errors/404.html"):
    """Página 404 com link de volta para a escala do mês."""
    return render(request, template_name, {"path": request.path}, status=404)
