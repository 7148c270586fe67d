"""Testes unitários para o SheetRowSink."""

from unittest.mock import Mock, patch

from t212.sheets.writer import SheetRowSink


class TestSheetRowSink:
    """Testes para SheetRowSink.write_rows."""

    @patch("t212.sheets.writer.get_worksheet")
    def test_write_rows_replaces_content(self, mock_get_worksheet):
        """Deve limpar a aba e escrever cabeçalho e linhas a partir de A1."""
        mock_worksheet = Mock()
        mock_get_worksheet.return_value = mock_worksheet
        mock_spreadsheet = Mock()
        sink = SheetRowSink(mock_spreadsheet)

        sink.write_rows("Dividends", ["Ticker", "Amount"], [["AAPL", 1.5], ["MSFT", 0.8]])

        mock_get_worksheet.assert_called_once_with(
            mock_spreadsheet, "Dividends", ["Ticker", "Amount"], create=True
        )
        mock_worksheet.clear.assert_called_once()
        mock_worksheet.resize.assert_called_once_with(rows=3, cols=2)
        mock_worksheet.update.assert_called_once_with(
            values=[["Ticker", "Amount"], ["AAPL", 1.5], ["MSFT", 0.8]],
            range_name="A1",
        )

    @patch("t212.sheets.writer.get_worksheet")
    def test_write_rows_uses_widest_row(self, mock_get_worksheet):
        """Linhas espalhadas mais largas que o cabeçalho devem caber na aba."""
        mock_worksheet = Mock()
        mock_get_worksheet.return_value = mock_worksheet
        sink = SheetRowSink(Mock())

        sink.write_rows("Orders", ["Id", "Tags"], [[1, "a", "b", "c"]])

        mock_worksheet.resize.assert_called_once_with(rows=2, cols=4)

    @patch("t212.sheets.writer.get_worksheet")
    def test_write_headers_only(self, mock_get_worksheet):
        """Sem linhas, deve escrever apenas o cabeçalho."""
        mock_worksheet = Mock()
        mock_get_worksheet.return_value = mock_worksheet
        sink = SheetRowSink(Mock())

        sink.write_rows("Pies", ["Id"], [])

        mock_worksheet.update.assert_called_once_with(values=[["Id"]], range_name="A1")
