"""
Testes unitários para o módulo worksheet.
"""

from unittest.mock import Mock

import pytest
from gspread.exceptions import WorksheetNotFound

import t212.sheets
from t212.sheets import worksheet
from t212.sheets.worksheet import _create_worksheet, get_worksheet


class TestCreateWorksheet:
    """Testes para _create_worksheet."""

    def test_create_worksheet_with_header(self):
        """Deve criar a aba e inserir o cabeçalho na primeira linha."""
        mock_spreadsheet = Mock()
        mock_worksheet = Mock()
        mock_spreadsheet.add_worksheet.return_value = mock_worksheet

        result = _create_worksheet(mock_spreadsheet, "Pies", ["Id", "Cash"])

        assert result == mock_worksheet
        mock_spreadsheet.add_worksheet.assert_called_once_with(title="Pies", rows=100, cols=2)
        mock_worksheet.insert_row.assert_called_once_with(["Id", "Cash"], index=1)

    def test_create_worksheet_empty_header(self):
        """Deve criar aba sem cabeçalho se a lista estiver vazia."""
        mock_spreadsheet = Mock()
        mock_worksheet = Mock()
        mock_spreadsheet.add_worksheet.return_value = mock_worksheet

        result = _create_worksheet(mock_spreadsheet, "Pies", [])

        assert result == mock_worksheet
        mock_spreadsheet.add_worksheet.assert_called_once_with(title="Pies", rows=100, cols=1)
        mock_worksheet.insert_row.assert_not_called()


class TestGetWorksheet:
    """Testes para get_worksheet."""

    def test_get_worksheet_exists(self):
        """Deve retornar aba existente sem recriar."""
        mock_worksheet = Mock()
        mock_worksheet.title = "Pies"
        mock_spreadsheet = Mock()
        mock_spreadsheet.title = "Portfolio"
        mock_spreadsheet.worksheet.return_value = mock_worksheet

        result = get_worksheet(mock_spreadsheet, "Pies", ["Id"])

        assert result == mock_worksheet
        mock_spreadsheet.add_worksheet.assert_not_called()

    def test_get_worksheet_not_found_create_true(self):
        """Deve criar aba se não existir e create=True."""
        mock_new_worksheet = Mock()
        mock_new_worksheet.title = "Pies"
        mock_spreadsheet = Mock()
        mock_spreadsheet.title = "Portfolio"
        mock_spreadsheet.worksheet.side_effect = WorksheetNotFound("Not found")
        mock_spreadsheet.add_worksheet.return_value = mock_new_worksheet

        result = get_worksheet(mock_spreadsheet, "Pies", ["Id", "Cash"], create=True)

        assert result == mock_new_worksheet

    def test_get_worksheet_not_found_create_false(self):
        """Deve lançar exceção se não existir e create=False."""
        mock_spreadsheet = Mock()
        mock_spreadsheet.worksheet.side_effect = WorksheetNotFound("Not found")

        with pytest.raises(WorksheetNotFound):
            get_worksheet(mock_spreadsheet, "NonExistent", create=False)


class TestPublicApi:
    """Testes para a API pública do gateway de planilhas."""

    def test_header_names_come_from_header_store_only(self):
        """Nomes de coluna são responsabilidade do SheetHeaderStore, não do módulo worksheet."""
        assert not hasattr(worksheet, "get_header_mapping")
        assert "get_header_mapping" not in t212.sheets.__all__
        assert "SheetHeaderStore" in t212.sheets.__all__
