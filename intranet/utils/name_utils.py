"""
Utilidades de nombres de personas.

El CMS guarda nombres, primer y segundo apellido por separado; las tiendas
WooCommerce solo aceptan first_name/last_name.
"""

from typing import Optional


def join_full_name(*parts: Optional[str]) -> str:
    """Une las partes no vacías con un solo espacio."""
    return " ".join(part.strip() for part in parts if part and part.strip())


def split_full_name(full_name: Optional[str]) -> dict[str, Optional[str]]:
    """
    Divide un nombre completo en nombres y apellidos.

    - 1 palabra: solo nombres
    - 2 palabras: nombres + primer apellido
    - 3 o más: todo menos las dos últimas son nombres, luego primer y segundo apellido

    Returns:
        dict con nombres, primer_apellido y segundo_apellido
    """
    words = (full_name or "").split()
    if not words:
        return {"nombres": None, "primer_apellido": None, "segundo_apellido": None}
    if len(words) == 1:
        return {"nombres": words[0], "primer_apellido": None, "segundo_apellido": None}
    if len(words) == 2:
        return {"nombres": words[0], "primer_apellido": words[1], "segundo_apellido": None}
    return {
        "nombres": " ".join(words[:-2]),
        "primer_apellido": words[-2],
        "segundo_apellido": words[-1],
    }


def split_platform_name(full_name: Optional[str]) -> tuple[str, str]:
    """
    First whitespace token is the first name, the remainder is the last name.

    Lossy by construction: "María José Pérez" becomes ("María", "José Pérez").
    """
    words = (full_name or "").split()
    if not words:
        return "", ""
    return words[0], " ".join(words[1:])
