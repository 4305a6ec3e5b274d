import unittest

from natspec_docs import (
    Contract,
    MalformedInputError,
    Method,
    Parameter,
    RenderOptions,
    render,
    render_contract,
)
from tests._util import token, vault


class RenderExampleTests(unittest.TestCase):
    def test_token_transfer_page(self):
        md = render([token()])
        expected = (
            "# Token.sol\n"
            "\n"
            "## Methods\n"
            "\n"
            "### transfer\n"
            "\n"
            "```solidity\n"
            "function transfer(address to) external\n"
            "```\n"
            "\n"
            "#### Parameters\n"
            "\n"
            "| Name | Type | Description |\n"
            "|------|------|-------------|\n"
            "| to | address | recipient |\n"
        )
        self.assertEqual(md, expected)
        self.assertNotIn("Return Values", md)

    def test_full_contract_header(self):
        md = render([vault()])
        self.assertTrue(md.startswith(
            "# Vault.sol\n\n"
            "A simple vault\n\n"
            "**Author: Alice**\n\n"
            "Holds deposits for many users.\n\n"
            "*Deposit and withdraw tokens.*\n\n"
            "## Methods\n"
        ))

    def test_empty_input_renders_nothing(self):
        self.assertEqual(render([]), "")


class OptionalSectionTests(unittest.TestCase):
    def test_absent_natspec_emits_no_lines(self):
        md = render([token()])
        self.assertNotIn("**Author", md)
        # heading is followed directly by the methods section
        self.assertIn("# Token.sol\n\n## Methods", md)
        self.assertNotIn("*", md.replace("**", ""))

    def test_empty_mappings_suppress_headings(self):
        md = render([{"name": "Empty", "methods": {}, "events": {}, "errors": {}}])
        self.assertEqual(md, "# Empty.sol\n")
        self.assertNotIn("## Methods", md)
        self.assertNotIn("### Events", md)
        self.assertNotIn("### Errors", md)

    def test_errors_only_when_present(self):
        self.assertNotIn("### Errors", render([token()]))
        self.assertIn("### Errors", render([vault()]))

    def test_groups_with_no_members_are_skipped(self):
        md = render([{"name": "Hollow", "methods": {"ghost": []}}])
        self.assertNotIn("### ghost", md)
        self.assertNotIn("## Methods", md)

    def test_return_values_table(self):
        md = render([vault()])
        self.assertIn(
            "#### Return Values\n\n"
            "| Name | Type | Description |\n"
            "|------|------|-------------|\n"
            "| - | bool | success flag |",
            md,
        )

    def test_method_without_params_has_no_tables(self):
        contract = {"name": "C", "methods": {"ping": [{"signature": "function ping() external"}]}}
        md = render([contract])
        self.assertNotIn("#### Parameters", md)
        self.assertNotIn("#### Return Values", md)


class MemberNatspecTests(unittest.TestCase):
    def test_method_uses_its_own_details_and_notice(self):
        md = render([vault()])
        section = md.split("### withdraw", 1)[1].split("### deposit", 1)[0]
        self.assertIn("Reverts when the balance is too low.", section)
        self.assertIn("*Withdraw `amount` tokens.*", section)
        self.assertIn("*Withdraw everything.*", section)
        self.assertNotIn("Holds deposits for many users.", section)
        self.assertNotIn("*Deposit and withdraw tokens.*", section)

    def test_details_precede_notice_after_code_block(self):
        md = render([vault()])
        self.assertIn(
            "```solidity\n"
            "function withdraw(uint256 amount) external nonpayable returns (bool)\n"
            "```\n\n"
            "Reverts when the balance is too low.\n\n"
            "*Withdraw `amount` tokens.*\n\n"
            "#### Parameters",
            md,
        )


class EventAndErrorTests(unittest.TestCase):
    def test_event_table_has_indexed_column(self):
        md = render([vault()])
        self.assertIn(
            "### Events\n\n"
            "### Deposited\n\n"
            "```solidity\n"
            "event Deposited(address user, uint256 amount)\n"
            "```\n\n"
            "*Emitted on deposit.*\n\n"
            "#### Parameters\n\n"
            "| Name | Type | Indexed | Description |\n"
            "|------|------|---------|-------------|\n"
            "| user | address | true | depositor |\n"
            "| amount | uint256 | false | value |\n"
            "| memo | string | - | free text |",
            md,
        )

    def test_error_section(self):
        md = render([vault()])
        self.assertTrue(md.endswith(
            "### Errors\n\n"
            "### InsufficientBalance\n\n"
            "```solidity\n"
            "error InsufficientBalance(uint256 available)\n"
            "```\n\n"
            "Balance check failed.\n\n"
            "#### Parameters\n\n"
            "| Name | Type | Description |\n"
            "|------|------|-------------|\n"
            "| available | uint256 | current balance |\n"
        ))
        self.assertNotIn("Indexed", md.split("### Errors", 1)[1])


class OrderingTests(unittest.TestCase):
    def test_contracts_groups_and_members_keep_supplied_order(self):
        md = render([vault(), token()])
        self.assertLess(md.index("# Vault.sol"), md.index("# Token.sol"))
        # "withdraw" was supplied before "deposit"
        self.assertLess(md.index("### withdraw"), md.index("### deposit"))
        self.assertLess(
            md.index("function withdraw(uint256 amount)"),
            md.index("function withdraw() external"),
        )

    def test_parameter_rows_in_supplied_order(self):
        params = [
            {"name": n, "kind": "uint8", "doc": f"doc {n}"} for n in ("zeta", "alpha", "mid")
        ]
        contract = {"name": "P", "methods": {"f": [{"signature": "function f()", "params": params}]}}
        md = render([contract])
        rows = [line for line in md.splitlines() if line.startswith("| ") and "uint8" in line]
        self.assertEqual(rows, [
            "| zeta | uint8 | doc zeta |",
            "| alpha | uint8 | doc alpha |",
            "| mid | uint8 | doc mid |",
        ])

    def test_contracts_separated_by_blank_line(self):
        md = render([{"name": "A"}, {"name": "B"}])
        self.assertEqual(md, "# A.sol\n\n# B.sol\n")

    def test_rendering_is_idempotent(self):
        contracts = [vault(), token()]
        self.assertEqual(render(contracts), render(contracts))


class CellFormattingTests(unittest.TestCase):
    def test_pipes_and_newlines_are_escaped(self):
        contract = Contract(
            name="Cells",
            methods={"f": (Method(
                signature="function f(uint256 x)",
                params=(Parameter(name="x", kind="uint256", doc="a | b\n  continued"),),
            ),)},
        )
        md = render([contract])
        self.assertIn("| x | uint256 | a \\| b continued |", md)

    def test_carriage_returns_are_collapsed(self):
        contract = {"name": "C", "methods": {"f": [{
            "signature": "function f(uint256 x)",
            "params": [{"name": "x", "kind": "uint256", "doc": "first\rsecond\r\nthird"}],
        }]}}
        md = render([contract])
        self.assertIn("| x | uint256 | first second third |", md)
        self.assertNotIn("\r", md)

    def test_empty_doc_uses_placeholder(self):
        contract = {"name": "C", "methods": {"f": [{
            "signature": "function f(uint256)",
            "params": [{"name": "", "kind": "uint256", "doc": ""}],
        }]}}
        self.assertIn("| - | uint256 | - |", render([contract]))
        self.assertIn("| ? | uint256 | ? |", render([contract], {"placeholder": "?"}))


class OptionsTests(unittest.TestCase):
    def test_custom_language_and_suffix(self):
        md = render([token()], RenderOptions(code_language="sol", source_suffix=""))
        self.assertIn("# Token\n", md)
        self.assertIn("```sol\n", md)

    def test_options_mapping_is_validated(self):
        from natspec_docs import SchemaError
        with self.assertRaises(SchemaError):
            render([token()], {"max_workers": 0})

    def test_parallel_rendering_matches_serial(self):
        contracts = [vault(), token()] + [{"name": f"C{i}"} for i in range(10)]
        serial = render(contracts)
        parallel = render(contracts, RenderOptions(max_workers=4))
        self.assertEqual(serial, parallel)


class MalformedInputTests(unittest.TestCase):
    def test_missing_name_raises(self):
        with self.assertRaisesRegex(MalformedInputError, r"contracts\[0\]: missing required \['name'\]"):
            render([{"title": "No name"}])

    def test_null_signature_aborts_whole_render(self):
        bad = vault()
        bad["methods"]["deposit"][0]["signature"] = None
        with self.assertRaisesRegex(
            MalformedInputError,
            r"contracts\[1\]\.methods\.deposit\[0\]\.signature: expected \['string'\], got NoneType",
        ):
            render([token(), bad])

    def test_dataclass_with_null_name_raises(self):
        with self.assertRaises(MalformedInputError):
            render([Contract(name=None)])  # type: ignore[arg-type]

    def test_non_contract_item_raises(self):
        with self.assertRaises(MalformedInputError):
            render([42])

    def test_single_mapping_instead_of_sequence_raises(self):
        with self.assertRaises(MalformedInputError):
            render(token())

    def test_render_contract_validates(self):
        with self.assertRaises(MalformedInputError):
            render_contract({"name": "X", "methods": {"f": [{"params": []}]}})

    def test_dataclass_with_dict_member_raises(self):
        contract = Contract(name="X", methods={"f": [{"signature": "function f()"}]})
        with self.assertRaisesRegex(
            MalformedInputError, r"contracts\[0\]\.methods\.f\[0\]: expected Method, got dict"
        ):
            render([contract])

    def test_dataclass_with_dict_parameter_raises(self):
        method = Method(signature="function f(uint8 a)", params=[{"name": "a", "kind": "uint8", "doc": ""}])
        with self.assertRaisesRegex(
            MalformedInputError,
            r"contracts\[0\]\.methods\.f\[0\]\.params\[0\]: expected Parameter, got dict",
        ):
            render([Contract(name="X", methods={"f": (method,)})])

    def test_dataclass_with_wrong_member_type_raises(self):
        contract = Contract(name="X", errors={"E": (Method(signature="function f()"),)})
        with self.assertRaisesRegex(MalformedInputError, r"errors\.E\[0\]: expected Error, got Method"):
            render([contract])

    def test_read_only_group_mapping_is_accepted(self):
        from types import MappingProxyType

        method = Method(
            signature="function f(uint8 a)",
            params=(Parameter(name="a", kind="uint8", doc="amount"),),
        )
        contract = Contract(name="X", methods=MappingProxyType({"f": (method,)}))
        md = render([contract])
        self.assertIn("### f", md)
        self.assertIn("| a | uint8 | amount |", md)


class RenderContractTests(unittest.TestCase):
    def test_render_contract_has_no_trailing_newline(self):
        self.assertEqual(render_contract({"name": "A"}), "# A.sol")

    def test_render_contract_matches_render(self):
        self.assertEqual(render_contract(vault()) + "\n", render([vault()]))
