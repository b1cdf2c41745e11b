from __future__ import annotations

from typing import Any

import httpx

from .config_types import ClientConfig, Environment, RequestOptions
from .encoding import QueryParam, coerce_params, without_param
from .errors import ConfigurationError, UnrecognizedResponseError
from .executor import NormalizedResponse, RequestExecutor, RequestSpec, coerce_headers
from .operations import OPERATIONS, Operation, check_required, get_operation
from .results import interpret_response, serialize_response


class ERPCleanClient:
    def __init__(self, cfg: ClientConfig | None = None, *, transport: httpx.BaseTransport | None = None):
        self._cfg = cfg if cfg is not None else ClientConfig()
        self._x = RequestExecutor(self._cfg, transport=transport)

    @property
    def config(self) -> ClientConfig:
        return self._cfg

    def close(self) -> None:
        self._x.close()

    # --- session settings ---
    def set_token(self, token: str) -> None:
        self._cfg.token = token

    def set_user_token(self, token: str) -> None:
        self._cfg.user_token = token

    def set_environment(self, environment: Environment | int | str) -> None:
        self._cfg.environment = Environment.parse(environment)

    def set_debug(self, debug: bool) -> None:
        self._cfg.debug = bool(debug)

    def set_upload(self, upload: bool) -> None:
        self._cfg.upload = bool(upload)

    def set_decode(self, decode: bool) -> None:
        self._cfg.decode = bool(decode)

    # --- generic dispatch ---
    def _run(
            self,
            op: Operation,
            data: dict | None = None,
            params=None,
            headers=None,
            *,
            path: str | None = None,
    ) -> NormalizedResponse:
        check_required(op, data)
        spec = RequestSpec(
            path=path or op.route,
            method=op.method,
            body=data if op.method in ("POST", "PUT") else None,
            params=coerce_params(params),
            headers=coerce_headers(headers),
        )
        options = RequestOptions(upload=True) if op.upload else None
        resp = self._x.execute(spec, options)
        if not op.interpret:
            return resp
        return interpret_response(resp)

    def call(self, name: str, data: dict | None = None, params=None, headers=None) -> NormalizedResponse:
        """Run any catalog operation by name."""
        op = get_operation(name)
        if "{" in op.route:
            raise ConfigurationError(f"Operation {op.name} has no generic form, use ERPCleanClient.{op.name}()")
        return self._run(op, data, params, headers)

    def _post(self, name: str, data: dict, params=None, headers=None) -> NormalizedResponse:
        return self._run(OPERATIONS[name], data, params, headers)

    def _get(self, name: str, params=None, headers=None) -> NormalizedResponse:
        return self._run(OPERATIONS[name], None, params, headers)

    # --- companies ---
    def cadastra_empresa(self, data: dict, params=None, headers=None) -> NormalizedResponse:
        return self._post("cadastra_empresa", data, params, headers)

    def atualiza_config_empresa(self, data: dict, params=None, headers=None) -> NormalizedResponse:
        return self._post("atualiza_config_empresa", data, params, headers)

    def consulta_empresa_cnpj(self, cnpj: str, params=None, headers=None) -> NormalizedResponse:
        query = without_param(params, "cnpj")
        query.append(QueryParam("cnpj", cnpj))
        return self._get("consulta_empresa_cnpj", query, headers)

    def consulta_logo(self, cnpj: str, params=None, headers=None) -> bytes | None:
        """Look the company up by CNPJ and fetch its logo.

        Lookup failures raise like any other operation. A failed logo fetch is
        not an error: it returns None.
        """
        found = self.consulta_empresa_cnpj(cnpj, params, headers)
        company_id = found.body.get("id") if isinstance(found.body, dict) else None
        if company_id is None:
            raise UnrecognizedResponseError(
                found.http_code, "company lookup returned no id", serialize_response(found), found
            )
        op = OPERATIONS["consulta_logo"]
        logo = self._x.execute(
            RequestSpec(op.route.format(company_id=company_id), op.method),
            RequestOptions(decode=False),
        )
        if logo.http_code == 200:
            return logo.body
        return None

    def consulta_email(self, email: str, params=None, headers=None) -> NormalizedResponse:
        return self._post("consulta_email", {"email": email}, params, headers)

    def cadastra_teste_gratis(self, data: dict, params=None, headers=None) -> NormalizedResponse:
        return self._post("cadastra_teste_gratis", data, params, headers)

    def cadastra_token_contador(self, data: dict, params=None, headers=None) -> NormalizedResponse:
        return self._post("cadastra_token_contador", data, params, headers)

    # --- fiscal tables ---
    def busca_sit_trib_icms(self, params=None, headers=None) -> NormalizedResponse:
        return self._get("busca_sit_trib_icms", params, headers)

    def busca_sit_trib_ipi(self, params=None, headers=None) -> NormalizedResponse:
        return self._get("busca_sit_trib_ipi", params, headers)

    def busca_sit_trib_pis(self, params=None, headers=None) -> NormalizedResponse:
        return self._get("busca_sit_trib_pis", params, headers)

    def busca_sit_trib_cofins(self, params=None, headers=None) -> NormalizedResponse:
        return self._get("busca_sit_trib_cofins", params, headers)

    def busca_mod_icms(self, params=None, headers=None) -> NormalizedResponse:
        return self._get("busca_mod_icms", params, headers)

    def busca_mod_icms_st(self, params=None, headers=None) -> NormalizedResponse:
        return self._get("busca_mod_icms_st", params, headers)

    def busca_motivo_deson_icms(self, params=None, headers=None) -> NormalizedResponse:
        return self._get("busca_motivo_deson_icms", params, headers)

    def cadastra_cfop(self, data: dict, params=None, headers=None) -> NormalizedResponse:
        return self._post("cadastra_cfop", data, params, headers)

    def cadastra_ncm(self, data: dict, params=None, headers=None) -> NormalizedResponse:
        return self._post("cadastra_ncm", data, params, headers)

    def cadastra_cest(self, data: dict, params=None, headers=None) -> NormalizedResponse:
        return self._post("cadastra_cest", data, params, headers)

    # --- products ---
    def busca_unidades(self, params=None, headers=None) -> NormalizedResponse:
        return self._get("busca_unidades", params, headers)

    def busca_origens(self, params=None, headers=None) -> NormalizedResponse:
        return self._get("busca_origens", params, headers)

    def busca_tipos(self, params=None, headers=None) -> NormalizedResponse:
        return self._get("busca_tipos", params, headers)

    def busca_tipos_especificos(self, params=None, headers=None) -> NormalizedResponse:
        return self._get("busca_tipos_especificos", params, headers)

    def cadastra_produto(self, data: dict, params=None, headers=None) -> NormalizedResponse:
        return self._post("cadastra_produto", data, params, headers)

    # --- financial ---
    def busca_contas(self, params=None, headers=None) -> NormalizedResponse:
        return self._get("busca_contas", params, headers)

    def busca_contas_com_baixas_de_notas_fiscais(self, params=None, headers=None) -> NormalizedResponse:
        return self._get("busca_contas_com_baixas_de_notas_fiscais", params, headers)

    def busca_categorias(self, params=None, headers=None) -> NormalizedResponse:
        return self._get("busca_categorias", params, headers)

    def busca_pessoas(self, params=None, headers=None) -> NormalizedResponse:
        return self._get("busca_pessoas", params, headers)

    def busca_contas_bancarias(self, params=None, headers=None) -> NormalizedResponse:
        return self._get("busca_contas_bancarias", params, headers)

    def cadastra_conta_bancaria(self, data: dict, params=None, headers=None) -> NormalizedResponse:
        return self._post("cadastra_conta_bancaria", data, params, headers)

    def cadastra_categoria(self, data: dict, params=None, headers=None) -> NormalizedResponse:
        return self._post("cadastra_categoria", data, params, headers)

    def cadastra_pessoa(self, data: dict, params=None, headers=None) -> NormalizedResponse:
        return self._post("cadastra_pessoa", data, params, headers)

    def cadastra_cobranca(self, data: dict, params=None, headers=None) -> NormalizedResponse:
        return self._post("cadastra_cobranca", data, params, headers)

    # --- sales / purchases / invoices ---
    def cadastra_serie_fiscal(self, data: dict, params=None, headers=None) -> NormalizedResponse:
        return self._post("cadastra_serie_fiscal", data, params, headers)

    def cadastra_venda(self, data: dict, params=None, headers=None) -> NormalizedResponse:
        return self._post("cadastra_venda", data, params, headers)

    def cadastra_compra(self, data: dict, params=None, headers=None) -> NormalizedResponse:
        return self._post("cadastra_compra", data, params, headers)

    def importa_xml_nfe(self, data: dict, params=None, headers=None) -> NormalizedResponse:
        return self._post("importa_xml_nfe", data, params, headers)
