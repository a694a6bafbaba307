import json

from flask import Blueprint, Response, current_app, stream_with_context

from decorators import login_required, usuario_actual

eventos_bp = Blueprint("eventos_bp", __name__, url_prefix="/api/v1/eventos")


def _formatear_sse(evento: str, datos) -> str:
    return f"event: {evento}\ndata: {json.dumps(datos, ensure_ascii=False)}\n\n"


@eventos_bp.get("")
@login_required
def stream_eventos():
    """Canal Server-Sent Events con los avisos de pedidos y mensajes de chat."""
    difusor = current_app.extensions["difusor_eventos"]
    ping = float(current_app.config.get("EVENTOS_PING_SEGUNDOS", 15))
    username = usuario_actual()

    def generar():
        sus = difusor.suscribir(username)
        try:
            yield ": conectado\n\n"
            while True:
                item = sus.siguiente(timeout=ping)
                if item is None:
                    yield ": ping\n\n"
                    continue
                evento, datos = item
                yield _formatear_sse(evento, datos)
        finally:
            difusor.desuscribir(sus)

    headers = {"Cache-Control": "no-cache", "X-Accel-Buffering": "no"}
    return Response(stream_with_context(generar()), mimetype="text/event-stream", headers=headers)
