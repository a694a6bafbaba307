import re

import pytest

from servicios.password.generador import GeneradorPassword, DiccionarioNoDisponibleError


def test_generar_concatena_palabras_capitalizadas(diccionario_path):
    generador = GeneradorPassword(diccionario_path)

    password = generador.generar(4)

    partes = re.findall(r"[A-Z][a-z]*", password)
    assert len(partes) == 4
    assert all(p.lower() in {"casa", "perro", "luna"} for p in partes)


def test_diccionario_vacio_o_inexistente(tmp_path):
    vacio = tmp_path / "vacio.txt"
    vacio.write_text("\n\n", encoding="utf-8")

    with pytest.raises(DiccionarioNoDisponibleError):
        GeneradorPassword(vacio).generar(1)
    with pytest.raises(DiccionarioNoDisponibleError):
        GeneradorPassword(tmp_path / "no-existe.txt").texto_diccionario()


def test_rutas_password(cliente_user):
    resp = cliente_user.get("/api/v1/password/diccionario")
    assert resp.status_code == 200
    assert "perro" in resp.get_data(as_text=True)

    resp = cliente_user.get("/api/v1/password/generar?palabras=2")
    assert resp.status_code == 200
    assert resp.get_json()["palabras"] == 2

    assert cliente_user.get("/api/v1/password/generar?palabras=0").status_code == 400
    assert cliente_user.get("/api/v1/password/generar?palabras=6").status_code == 400
    assert cliente_user.get("/api/v1/password/generar?palabras=x").status_code == 400


def test_diccionario_ilegible_devuelve_500(cliente_user, diccionario_path):
    diccionario_path.unlink()

    assert cliente_user.get("/api/v1/password/diccionario").status_code == 500
    assert cliente_user.get("/api/v1/password/generar").status_code == 500
