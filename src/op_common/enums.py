"""Global enums: must match the values stored in the hosted database exactly."""

from enum import Enum


class TransactionType(str, Enum):
    RECEITA = "receita"
    DESPESA = "despesa"


class TransactionStatus(str, Enum):
    PENDENTE = "pendente"
    RECEBIDO = "recebido"
    PAGO = "pago"
    VENCIDO = "vencido"
    CANCELADO = "cancelado"


class PaymentMethod(str, Enum):
    DINHEIRO = "dinheiro"
    PIX = "pix"
    CARTAO_CREDITO = "cartao_credito"
    CARTAO_DEBITO = "cartao_debito"
    TRANSFERENCIA = "transferencia"
    BOLETO = "boleto"


class ProjectStatus(str, Enum):
    PLANEJAMENTO = "Planejamento"
    EXECUTANDO = "Executando"
    PAUSADO = "Pausado"
    CONCLUIDO = "Concluído"
    CANCELADO = "Cancelado"


class ProjectHealth(str, Enum):
    SAUDAVEL = "Saudável"
    ATENCAO = "Atenção"
    CRITICO = "Crítico"


class CashFlowHealth(str, Enum):
    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


class GrowthTrend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"
