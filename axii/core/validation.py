import re
from typing import Optional
import email_validator

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SYMBOL_PATTERN = re.compile(r"[^\w\s]|_")

MIN_NAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6
STRONG_PASSWORD_LENGTH = 8


class ValidationFailed(ValueError):
    """Erro de formulário com mensagem pronta para exibir ao usuário."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def validate_email(email: str) -> bool:
    if not EMAIL_PATTERN.match(email or ""):
        return False
    # Mesma regra do EmailStr usado nas respostas (domínios .local, .test etc. são recusados)
    try:
        email_validator.validate_email(email, check_deliverability=False)
    except email_validator.EmailNotValidError:
        return False
    return True


def validate_registration(name: str, email: str, password: str, confirm_password: Optional[str] = None) -> None:
    if not name or not email or not password or confirm_password == "":
        raise ValidationFailed("Preencha todos os campos")

    if len(name.strip()) < MIN_NAME_LENGTH:
        raise ValidationFailed("Nome deve ter pelo menos 3 caracteres")

    if not validate_email(email):
        raise ValidationFailed("E-mail inválido")

    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed("Senha deve ter pelo menos 6 caracteres")

    if confirm_password is not None and password != confirm_password:
        raise ValidationFailed("As senhas não coincidem")


def validate_profile(name: str, email: str) -> None:
    if not (name or "").strip() or not (email or "").strip():
        raise ValidationFailed("Nome e e-mail são obrigatórios")

    if not validate_email(email.strip()):
        raise ValidationFailed("E-mail inválido")


def validate_password_change(current_password: str, new_password: str, confirm_password: str) -> None:
    if not current_password or not new_password or not confirm_password:
        raise ValidationFailed("Todos os campos são obrigatórios")

    if new_password != confirm_password:
        raise ValidationFailed("A nova senha e a confirmação não conferem")

    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed("A nova senha deve ter no mínimo 6 caracteres")

    if current_password == new_password:
        raise ValidationFailed("A nova senha deve ser diferente da senha atual")


def password_strength(password: str) -> dict:
    """
    Avalia a força da senha para o medidor da tela de segurança.
    Cada critério atendido soma um ponto (0 a 5):
    - tamanho mínimo de 8 caracteres
    - letra minúscula, letra maiúscula, número e símbolo
    Nível: weak (< 3), medium (3-4), strong (5).
    """
    checks = [
        (len(password) >= STRONG_PASSWORD_LENGTH, "Use pelo menos 8 caracteres"),
        (any(c.islower() for c in password), "Adicione letras minúsculas"),
        (any(c.isupper() for c in password), "Adicione letras maiúsculas"),
        (any(c.isdigit() for c in password), "Adicione números"),
        (bool(SYMBOL_PATTERN.search(password)), "Adicione símbolos (!@#$...)"),
    ]

    score = sum(1 for passed, _ in checks if passed)
    feedback = [hint for passed, hint in checks if not passed]

    if score >= 5:
        level = "strong"
    elif score >= 3:
        level = "medium"
    else:
        level = "weak"

    return {"score": score, "level": level, "feedback": feedback}
