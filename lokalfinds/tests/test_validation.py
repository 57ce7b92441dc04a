import unittest
from decimal import Decimal

from lokalfinds.core.exceptions import ErrorKind, ValidationError
from lokalfinds.services.validation import (
    parse_price,
    validate_email,
    validate_login,
    validate_name,
    validate_password,
    validate_rating,
    validate_signup,
)


class FormValidationTests(unittest.TestCase):
    def test_email(self):
        self.assertEqual(validate_email("  ana@example.com "), "ana@example.com")
        for bad in ("ana", "ana@example", "a na@example.com", "@example.com"):
            with self.subTest(email=bad):
                with self.assertRaises(ValidationError) as ctx:
                    validate_email(bad)
                self.assertEqual(ctx.exception.message, "Please enter a valid email address")
                self.assertEqual(ctx.exception.kind, ErrorKind.VALIDATION)

    def test_login_requires_both_fields(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_login("ana@example.com", "")
        self.assertEqual(ctx.exception.message, "Please fill in all fields")
        self.assertEqual(ctx.exception.field, "password")

    def test_password_mismatch_checked_before_length(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_password("abc", "abd")
        self.assertEqual(ctx.exception.message, "Passwords do not match")

    def test_short_password(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_password("abc")
        self.assertEqual(ctx.exception.message, "Password must be at least 6 characters")
        self.assertEqual(validate_password("secret"), "secret")

    def test_names(self):
        for good in ("Ana", "Mary-Jane", "O'Neil", "Jr.", "José María"):
            with self.subTest(name=good):
                self.assertEqual(validate_name(f" {good} ", "first_name"), good)
        for bad in ("R2D2", "ana_b", "<script>"):
            with self.subTest(name=bad):
                with self.assertRaises(ValidationError):
                    validate_name(bad, "last_name")

    def test_signup_terms(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_signup("ana@example.com", "secret1", "Ana", "Cruz", accepted_terms=False)
        self.assertEqual(ctx.exception.field, "accepted_terms")

    def test_signup_trims(self):
        self.assertEqual(
            validate_signup(" ana@example.com", "secret1", " Ana", "Cruz ", "secret1"),
            ("ana@example.com", "Ana", "Cruz"),
        )

    def test_rating(self):
        self.assertEqual(validate_rating(5), 5)
        for bad in (None, 0, 6, True):
            with self.subTest(rating=bad):
                with self.assertRaises(ValidationError):
                    validate_rating(bad)

    def test_price(self):
        self.assertEqual(parse_price("12.5"), Decimal("12.50"))
        self.assertEqual(parse_price(3), Decimal("3.00"))
        self.assertEqual(parse_price("99999999.99"), Decimal("99999999.99"))
        for bad in ("", "abc", "-1", "NaN", None, "1e30", "100000000", "99999999.999"):
            with self.subTest(price=bad):
                with self.assertRaises(ValidationError):
                    parse_price(bad)


if __name__ == "__main__":
    unittest.main()
