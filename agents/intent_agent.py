from datetime import date
from functools import lru_cache

from pydantic_ai import Agent
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.providers.google import GoogleProvider

from config import CLASSIFIER_TEMPERATURE, GEMINI_MODEL_NAME, get_env_var

# -----------------------------
# Instruction Template
# -----------------------------
RESPONSE_SHAPE = """{
  "tipo": "transacao" | "tarefa",
  "acao": "inserir" | "editar" | "consultar" | "remover",
  "descricao": "string",
  "valor": number | null,
  "data": "YYYY-MM-DD" | null,
  "hora": "HH:mm" | null,
  "tipoTransacao": "ENTRADA" | "SAIDA" | null,
  "categoria": "string" | null,
  "periodo": "hoje" | "ontem" | "semana" | "mes" | null
}"""

RULES = (
    "REGRAS:\n"
    "1. RESUMO, EXTRATO ou CONSULTA (\"gastos do mês\", \"quanto gastei esta semana\", \"resumo de hoje\") => acao=\"consultar\".\n"
    "2. PERÍODO de uma consulta:\n"
    "   - \"hoje\", \"diário\", \"do dia\" => periodo=\"hoje\"\n"
    "   - \"ontem\" => periodo=\"ontem\"\n"
    "   - \"semana\", \"semanal\", \"desta semana\", \"da semana passada\" => periodo=\"semana\"\n"
    "   - \"mês\", \"mensal\", \"deste mês\", \"mês passado\" => periodo=\"mes\"\n"
    "3. Data explícita (\"18/12\", \"18/12/2025\", \"18 de dezembro\") vai em \"data\" no formato YYYY-MM-DD, no lugar de \"periodo\".\n"
    "4. Gasto, compra ou pagamento => tipoTransacao=\"SAIDA\".\n"
    "5. Recebimento, salário ou venda => tipoTransacao=\"ENTRADA\".\n"
    "6. Tarefa: valor, tipoTransacao, categoria e periodo são sempre null.\n"
    "7. Categorize transações com uma categoria conhecida sempre que possível.\n"
    "8. Nunca escreva \"null\" entre aspas. Use null literal quando não houver valor, data ou hora.\n"
)


def build_prompt(message: str, today: date) -> str:
    """
    The single instruction sent to the model: persona, response shape,
    disambiguation rules and the message itself.
    """
    return (
        "Você é Lume, uma assistente financeira inteligente. "
        "Analise a frase e retorne APENAS um JSON válido (sem crases e sem texto extra) no formato:\n\n"
        f"{RESPONSE_SHAPE}\n\n"
        f"{RULES}\n"
        f"Data de referência (hoje): {today.isoformat()}\n"
        f"Mensagem: \"{message}\"\n"
    )


# -----------------------------
# Provider / Model (built on first use)
# -----------------------------
@lru_cache(maxsize=1)
def get_intent_agent() -> Agent:
    provider = GoogleProvider(api_key=get_env_var("GOOGLE_API_KEY"))
    model = GoogleModel(GEMINI_MODEL_NAME, provider=provider)
    return Agent(
        model,
        output_type=str,
        model_settings={"temperature": CLASSIFIER_TEMPERATURE},
    )
