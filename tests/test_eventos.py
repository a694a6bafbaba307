from servicios.eventos.difusor import DifusorEventos


def test_publicar_sin_suscriptores():
    assert DifusorEventos().publicar("x", {}) == 0


def test_cola_llena_descarta_sin_bloquear():
    difusor = DifusorEventos(maxsize=1)
    sus = difusor.suscribir("ana")

    assert difusor.publicar("a", 1) == 1
    assert difusor.publicar("b", 2) == 0
    assert sus.siguiente(timeout=0.1) == ("a", 1)


def test_stream_sse_entrega_eventos(app, cliente_user):
    difusor = app.extensions["difusor_eventos"]
    resp = cliente_user.get("/api/v1/eventos")

    assert resp.status_code == 200
    assert resp.mimetype == "text/event-stream"

    chunks = iter(resp.response)
    primero = next(chunks)
    assert (primero.decode() if isinstance(primero, bytes) else primero) == ": conectado\n\n"
    assert difusor.total_suscripciones == 1

    difusor.publicar("nuevoPedido", {"id": 5})
    evento = next(chunks)
    evento = evento.decode() if isinstance(evento, bytes) else evento
    assert evento == 'event: nuevoPedido\ndata: {"id": 5}\n\n'

    resp.close()
    assert difusor.total_suscripciones == 0


def test_stream_requiere_sesion(client):
    assert client.get("/api/v1/eventos").status_code == 401
