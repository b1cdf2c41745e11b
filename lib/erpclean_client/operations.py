from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .errors import ConfigurationError


@dataclass(frozen=True)
class Operation:
    name: str
    method: str
    route: str
    required: tuple[tuple[str, str], ...] = ()
    upload: bool = False
    # False hands back the raw response whatever the status
    interpret: bool = True


def _op(name: str, method: str, route: str, **kwargs: Any) -> Operation:
    return Operation(name=name, method=method, route=route, **kwargs)


TOKEN_CONTADOR_REQUIRED = (
    ("name", "Informe o nome do contador"),
    ("email", "Informe o e-mail do contador"),
    ("cpfcnpj", "Informe o CPF ou CNPJ do contador"),
    ("phone", "Informe o telefone do contador"),
    ("name_company", "Informe o nome da empresa do contador"),
    ("customer_cpfcnpj", "Informe o CPF ou CNPJ da empresa que o contador irá acessar"),
)

_CATALOG = (
    _op("cadastra_empresa", "POST", "systems/companies"),
    _op("atualiza_config_empresa", "POST", "companies/settings"),
    _op("busca_sit_trib_icms", "GET", "cfops/situacao-tributaria-icms"),
    _op("busca_sit_trib_ipi", "GET", "cfops/situacao-tributaria-ipi"),
    _op("busca_sit_trib_pis", "GET", "cfops/situacao-tributaria-pis"),
    _op("busca_sit_trib_cofins", "GET", "cfops/situacao-tributaria-cofins"),
    _op("busca_mod_icms", "GET", "cfops/modalidade-icms"),
    _op("busca_mod_icms_st", "GET", "cfops/modalidade-icms-st"),
    _op("busca_motivo_deson_icms", "GET", "cfops/motivos-desoneracao"),
    _op("cadastra_cfop", "POST", "cfops"),
    _op("cadastra_ncm", "POST", "ncms"),
    _op("cadastra_cest", "POST", "cests"),
    _op("busca_unidades", "GET", "product-unit"),
    _op("busca_origens", "GET", "product-origin"),
    _op("busca_tipos", "GET", "product-type"),
    _op("busca_tipos_especificos", "GET", "product-specific-types"),
    _op("busca_contas", "GET", "installments/accountant"),
    _op("busca_contas_com_baixas_de_notas_fiscais", "GET", "invoices-payments"),
    _op("busca_categorias", "GET", "categories/select"),
    _op("busca_pessoas", "GET", "persons"),
    _op("busca_contas_bancarias", "GET", "accounts"),
    _op("cadastra_produto", "POST", "products"),
    _op("cadastra_conta_bancaria", "POST", "accounts"),
    _op("cadastra_categoria", "POST", "categories"),
    _op("cadastra_pessoa", "POST", "persons"),
    _op("cadastra_cobranca", "POST", "systems/installments"),
    _op("cadastra_serie_fiscal", "POST", "series"),
    _op("cadastra_venda", "POST", "systems/orders"),
    _op("cadastra_compra", "POST", "purchases"),
    _op(
        "importa_xml_nfe", "POST", "invoices/import",
        required=(("xmls", "Informe os XMLs a serem importadas"),),
        upload=True,
    ),
    _op("consulta_empresa_cnpj", "GET", "companies/verifycompanyexist"),
    _op("consulta_logo", "GET", "companies/{company_id}/logo"),
    _op("consulta_email", "POST", "companies/verify-email", interpret=False),
    _op("cadastra_teste_gratis", "POST", "register"),
    _op("cadastra_token_contador", "POST", "nfcontador/access-customer", required=TOKEN_CONTADOR_REQUIRED),
)

OPERATIONS: dict[str, Operation] = {op.name: op for op in _CATALOG}


def get_operation(name: str) -> Operation:
    key = (name or "").strip().lower().replace("-", "_")
    op = OPERATIONS.get(key)
    if op is None:
        raise ConfigurationError(f"Unknown operation: {name}")
    return op


def check_required(op: Operation, data: Mapping[str, Any] | None) -> None:
    payload = data or {}
    for field_name, message in op.required:
        if not payload.get(field_name):
            raise ConfigurationError(message, field=field_name)
