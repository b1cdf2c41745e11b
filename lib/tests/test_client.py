from __future__ import annotations

import json

import httpx
import pytest

from erpclean_client import (
    ClientConfig,
    ConfigurationError,
    Environment,
    ERPCleanClient,
    RemoteError,
    UnrecognizedResponseError,
)
from erpclean_client.operations import OPERATIONS, TOKEN_CONTADOR_REQUIRED


def _client(handler, **overrides) -> tuple[ERPCleanClient, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def _record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    cfg = ClientConfig(token="tok", user_token="usr", environment=Environment.SANDBOX)
    for key, value in overrides.items():
        setattr(cfg, key, value)
    return ERPCleanClient(cfg, transport=httpx.MockTransport(_record)), seen


def _ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"data": []})


CONTADOR = {
    "name": "Ana",
    "email": "ana@example.com",
    "cpfcnpj": "12345678901",
    "phone": "11999999999",
    "name_company": "Ana Contabilidade",
    "customer_cpfcnpj": "12345678000199",
}


def test_setters_mutate_session_config() -> None:
    client, _ = _client(_ok)
    client.set_token("t2")
    client.set_user_token("u2")
    client.set_environment("production")
    client.set_debug(True)
    client.set_decode(False)
    client.set_upload(True)
    cfg = client.config
    assert (cfg.token, cfg.user_token, cfg.environment) == ("t2", "u2", Environment.PRODUCTION)
    assert (cfg.debug, cfg.decode, cfg.upload) == (True, False, True)


def test_set_environment_rejects_unknown_values() -> None:
    client, _ = _client(_ok)
    with pytest.raises(ConfigurationError):
        client.set_environment(5)
    assert client.config.environment is Environment.SANDBOX


@pytest.mark.parametrize("name", sorted(n for n, op in OPERATIONS.items() if op.method == "GET" and "{" not in op.route))
def test_get_operations_hit_their_route(name: str) -> None:
    client, seen = _client(_ok)
    if name == "consulta_empresa_cnpj":
        resp = client.consulta_empresa_cnpj("1")
    else:
        resp = getattr(client, name)(params=[("page", 1)])
    assert resp.http_code == 200
    assert seen[0].method == "GET"
    assert seen[0].url.path == "/api/" + OPERATIONS[name].route


@pytest.mark.parametrize(
    "name",
    sorted(n for n, op in OPERATIONS.items() if op.method == "POST" and not op.required and n != "consulta_email"),
)
def test_post_operations_send_json(name: str) -> None:
    client, seen = _client(_ok)
    resp = getattr(client, name)({"id": 1, "nome": "Teste"})
    assert resp.body == {"data": []}
    req = seen[0]
    assert req.method == "POST"
    assert req.url.path == "/api/" + OPERATIONS[name].route
    assert req.headers["content-type"] == "application/json"
    assert json.loads(req.content) == {"id": 1, "nome": "Teste"}


def test_operation_errors_follow_the_shared_rule() -> None:
    client, _ = _client(lambda r: httpx.Response(422, json={"errors": ["CNPJ inválido", "E-mail inválido"]}))
    with pytest.raises(RemoteError) as exc:
        client.cadastra_empresa({"cnpj": "x"})
    assert str(exc.value) == "CNPJ inválido\r\nE-mail inválido"


def test_consulta_empresa_cnpj_replaces_caller_cnpj() -> None:
    client, seen = _client(lambda r: httpx.Response(200, json={"id": 7}))
    client.consulta_empresa_cnpj("12345678000199", params=[{"name": "cnpj", "value": "old"}, ("page", 0)])
    params = seen[0].url.params
    assert params.get_list("cnpj") == ["12345678000199"]
    assert params["page"] == "0"
    assert seen[0].url.path == "/api/companies/verifycompanyexist"


def _logo_handler(logo_status: int, logo_content: bytes = b"\x89PNG-logo"):
    def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/verifycompanyexist"):
            return httpx.Response(200, json={"id": 7})
        if request.url.path == "/api/companies/7/logo":
            if logo_status == 200:
                return httpx.Response(200, content=logo_content, headers={"content-type": "image/png"})
            return httpx.Response(logo_status, json={"message": "Logo não encontrada"})
        return httpx.Response(500)

    return _handler


def test_consulta_logo_returns_raw_bytes() -> None:
    client, seen = _client(_logo_handler(200, b'{"not": "parsed"}'))
    assert client.consulta_logo("12345678000199") == b'{"not": "parsed"}'
    assert [r.url.path for r in seen] == ["/api/companies/verifycompanyexist", "/api/companies/7/logo"]
    assert client.config.decode is True


def test_consulta_logo_returns_none_when_logo_call_fails() -> None:
    client, _ = _client(_logo_handler(404))
    assert client.consulta_logo("12345678000199") is None


def test_consulta_logo_lookup_failure_raises() -> None:
    client, seen = _client(lambda r: httpx.Response(404, json={"message": "Empresa não encontrada"}))
    with pytest.raises(RemoteError) as exc:
        client.consulta_logo("12345678000199")
    assert str(exc.value) == "Empresa não encontrada"
    assert len(seen) == 1


def test_consulta_logo_lookup_without_id_is_unrecognized() -> None:
    client, seen = _client(lambda r: httpx.Response(200, json={"exists": False}))
    with pytest.raises(UnrecognizedResponseError):
        client.consulta_logo("12345678000199")
    assert len(seen) == 1


def test_consulta_email_returns_response_whatever_the_status() -> None:
    client, seen = _client(lambda r: httpx.Response(422, json={"message": "E-mail já cadastrado"}))
    resp = client.consulta_email("ana@example.com")
    assert resp.http_code == 422
    assert resp.body == {"message": "E-mail já cadastrado"}
    assert json.loads(seen[0].content) == {"email": "ana@example.com"}


@pytest.mark.parametrize("data", [{}, {"xmls": []}, {"xmls": ""}, {"xmls": None}])
def test_importa_xml_nfe_requires_xmls(data: dict) -> None:
    client, seen = _client(_ok)
    with pytest.raises(ConfigurationError) as exc:
        client.importa_xml_nfe(data)
    assert str(exc.value) == "Informe os XMLs a serem importadas"
    assert exc.value.field == "xmls"
    assert seen == []
    assert client.config.upload is False


def test_importa_xml_nfe_uploads_without_touching_session_flag() -> None:
    client, seen = _client(_ok)
    resp = client.importa_xml_nfe({"xmls": [("nota.xml", b"<nfe/>", "application/xml")]})
    assert resp.http_code == 200
    assert seen[0].url.path == "/api/invoices/import"
    assert seen[0].headers["content-type"].startswith("multipart/form-data; boundary=")
    assert b'name="xmls[0]"; filename="nota.xml"' in seen[0].content
    assert client.config.upload is False

    client.busca_unidades()
    assert seen[1].headers["content-type"] == "application/json"


@pytest.mark.parametrize("prior", [False, True])
def test_importa_xml_nfe_keeps_upload_flag_on_failure(prior: bool) -> None:
    client, _ = _client(lambda r: httpx.Response(422, json={"message": "XML inválido"}), upload=prior)
    with pytest.raises(RemoteError):
        client.importa_xml_nfe({"xmls": [("nota.xml", b"<x/>")]})
    assert client.config.upload is prior


@pytest.mark.parametrize("index", range(len(TOKEN_CONTADOR_REQUIRED)))
def test_cadastra_token_contador_reports_missing_field(index: int) -> None:
    field_name, message = TOKEN_CONTADOR_REQUIRED[index]
    data = dict(CONTADOR)
    data[field_name] = ""
    client, seen = _client(_ok)
    with pytest.raises(ConfigurationError) as exc:
        client.cadastra_token_contador(data)
    assert str(exc.value) == message
    assert exc.value.field == field_name
    assert seen == []


def test_cadastra_token_contador_checks_fields_in_order() -> None:
    client, _ = _client(_ok)
    with pytest.raises(ConfigurationError) as exc:
        client.cadastra_token_contador({"email": "ana@example.com"})
    assert str(exc.value) == "Informe o nome do contador"

    with pytest.raises(ConfigurationError) as exc:
        client.cadastra_token_contador({"name": "Ana", "phone": "1"})
    assert str(exc.value) == "Informe o e-mail do contador"


def test_cadastra_token_contador_posts_when_complete() -> None:
    client, seen = _client(lambda r: httpx.Response(200, json={"token": "abc"}))
    resp = client.cadastra_token_contador(CONTADOR)
    assert resp.body == {"token": "abc"}
    assert seen[0].url.path == "/api/nfcontador/access-customer"


def test_call_dispatches_by_name() -> None:
    client, seen = _client(_ok)
    client.call("busca-unidades", params={"page": 0})
    client.call("cadastra_ncm", {"codigo": "01012100"})
    assert str(seen[0].url).endswith("/api/product-unit?page=0")
    assert json.loads(seen[1].content) == {"codigo": "01012100"}


def test_call_rejects_unknown_and_templated_operations() -> None:
    client, seen = _client(_ok)
    with pytest.raises(ConfigurationError):
        client.call("nope")
    with pytest.raises(ConfigurationError):
        client.call("consulta_logo")
    assert seen == []
