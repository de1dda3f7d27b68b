"""Tests unitarios para normalización de RUT y nombres."""

from intranet.utils.name_utils import split_full_name, split_platform_name
from intranet.utils.rut_utils import format_rut, normalize_rut, rut_variants, ruts_match


class TestNormalizeRut:
    """Tests para normalize_rut y format_rut."""

    def test_all_common_formats_normalize_equal(self):
        """Debe normalizar puntos, guion y espacios al mismo valor."""
        assert normalize_rut("12.345.678-9") == "123456789"
        assert normalize_rut("12345678-9") == "123456789"
        assert normalize_rut(" 12 345 678 9 ") == "123456789"

    def test_verifier_digit_is_uppercased(self):
        """Debe pasar el dígito verificador k a mayúscula."""
        assert normalize_rut("7.654.321-k") == "7654321K"

    def test_empty_values(self):
        """Debe retornar cadena vacía para None o vacío."""
        assert normalize_rut(None) == ""
        assert normalize_rut("") == ""

    def test_format_rut(self):
        """Debe formatear como cuerpo-dv."""
        assert format_rut("12.345.678-9") == "12345678-9"
        assert format_rut("7654321k") == "7654321-K"

    def test_ruts_match(self):
        """Debe comparar por la forma normalizada."""
        assert ruts_match("12.345.678-9", "123456789") is True
        assert ruts_match("12.345.678-9", "12.345.678-0") is False

    def test_empty_ruts_never_match(self):
        """Dos RUT vacíos no son la misma identidad."""
        assert ruts_match("", "") is False
        assert ruts_match(None, None) is False


class TestRutVariants:
    """Tests para las variantes de RUT usadas en los filtros del CMS."""

    def test_variants_include_dotted_and_compact_forms(self):
        """Debe incluir la forma con guion, la compacta y la con puntos."""
        assert rut_variants("12345678-9") == ["12345678-9", "123456789", "12.345.678-9"]

    def test_variants_keep_original_first(self):
        """Debe conservar primero el valor tal como se recibió."""
        variants = rut_variants("12.345.678-9")
        assert variants[0] == "12.345.678-9"
        assert "12345678-9" in variants
        assert len(variants) == len(set(variants))

    def test_no_variants_for_empty_rut(self):
        """Sin RUT no hay variantes (y por lo tanto no hay request)."""
        assert rut_variants(None) == []
        assert rut_variants("  ") == []

    def test_k_check_digit_in_both_cases(self):
        """Un dígito verificador K se busca también en minúscula."""
        assert rut_variants("12345678-K") == [
            "12345678-K",
            "12345678K",
            "12.345.678-K",
            "12345678-k",
            "12345678k",
            "12.345.678-k",
        ]


class TestNames:
    """Tests para división de nombres."""

    def test_platform_name_is_lossy(self):
        """Debe usar la primera palabra como first_name y el resto como last_name."""
        assert split_platform_name("María José Pérez") == ("María", "José Pérez")
        assert split_platform_name("Ana") == ("Ana", "")
        assert split_platform_name(None) == ("", "")

    def test_split_full_name_three_words(self):
        """Debe asignar las dos últimas palabras a los apellidos."""
        assert split_full_name("Ana María Pérez Soto") == {
            "nombres": "Ana María",
            "primer_apellido": "Pérez",
            "segundo_apellido": "Soto",
        }
