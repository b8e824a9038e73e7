"""
Unit Tests - Order Loader
"""
from datetime import date

import pytest
import polars as pl
from polars.testing import assert_frame_equal

from sales_analytics.data.generators import write_orders
from sales_analytics.data.schema import ORDER_SCHEMA
from sales_analytics.ingestion.loader import (
    FileFormat,
    LoadConfig,
    LoadStatus,
    OrderLoader,
)


SPREADSHEET_CSV = """Order Id,Buyer_Email,Buyer_Name,Region,Category,Brand,Order_Status,Prime_Member,Revenue_USD,UnitsSold,OrderDate
A-1,ann@example.com,Ann,North America,Electronics,Sony,Completed,Yes,"$1,234.50",2,01/31/2024
A-2,bob@example.com,Bob, Europe ,Books,Penguin,Completed,No,19.99,1,2024-02-03
A-3,cat@example.com,Cat,Asia,Beauty,Olay,Cancelled,,7.5,,not a date
"""


@pytest.fixture
def spreadsheet_csv(tmp_path):
    path = tmp_path / "amazon_sales.csv"
    path.write_text(SPREADSHEET_CSV, encoding="utf-8")
    return path


class TestOrderLoader:
    """Tests for OrderLoader"""

    def test_generated_csv_round_trip(self, tmp_path, generated_orders):
        path = write_orders(generated_orders.head(200), tmp_path / "orders.csv")

        df, result = OrderLoader().load(path)

        assert result.status == LoadStatus.COMPLETED
        assert result.rows_loaded == 200
        assert result.unparseable_dates == 0
        assert dict(df.schema) == ORDER_SCHEMA
        assert_frame_equal(df, generated_orders.head(200), check_exact=False)

    def test_parquet(self, tmp_path, generated_orders):
        path = write_orders(generated_orders.head(50), tmp_path / "orders.parquet")

        df, result = OrderLoader().load(path)

        assert result.status == LoadStatus.COMPLETED
        assert_frame_equal(df, generated_orders.head(50))

    def test_spreadsheet_headers_and_values(self, spreadsheet_csv):
        df, result = OrderLoader().load(spreadsheet_csv)

        assert result.rows_loaded == 3
        assert df.columns[:len(ORDER_SCHEMA)] == list(ORDER_SCHEMA)
        assert df["order_id"].to_list() == ["A-1", "A-2", "A-3"]
        assert df["revenue"].to_list() == [1234.5, 19.99, 7.5]
        assert df["units_sold"].to_list() == [2, 1, None]
        assert df["prime_member"].to_list() == [1, 0, None]
        assert df["region"].to_list() == ["North America", "Europe", "Asia"]

    def test_dates_in_several_formats(self, spreadsheet_csv):
        df, result = OrderLoader().load(spreadsheet_csv)

        assert df["order_date"].to_list() == [date(2024, 1, 31), date(2024, 2, 3), None]
        assert result.unparseable_dates == 1

    def test_missing_columns_are_null(self, spreadsheet_csv):
        df, _ = OrderLoader().load(spreadsheet_csv)

        assert df["courier"].null_count() == 3
        assert df["delivery_days"].dtype == pl.Int64

    def test_custom_date_formats(self, tmp_path):
        path = tmp_path / "orders.csv"
        path.write_text("order_id,order_status,order_date\nA-1,Completed,31.01.2024\n", encoding="utf-8")

        df, result = OrderLoader(date_formats=["%d.%m.%Y"]).load(path)

        assert df["order_date"].to_list() == [date(2024, 1, 31)]
        assert result.unparseable_dates == 0

    def test_load_config(self, tmp_path):
        path = tmp_path / "orders.txt"
        path.write_text("order_id;order_status;revenue\nA-1;Completed;10.5\n", encoding="utf-8")

        config = LoadConfig(file_path=path, file_format=FileFormat.CSV, delimiter=";")
        df, result = OrderLoader().load(config)

        assert result.status == LoadStatus.COMPLETED
        assert df["revenue"].to_list() == [10.5]

    def test_ndjson(self, tmp_path):
        path = tmp_path / "orders.ndjson"
        path.write_text(
            '{"order_id": "A-1", "order_status": "Completed", "revenue": 12.0, "order_date": "2024-03-01"}\n',
            encoding="utf-8",
        )

        df, _ = OrderLoader().load(path)

        assert df["order_date"].to_list() == [date(2024, 3, 1)]
        assert df["revenue"].to_list() == [12.0]

    def test_file_hash(self, spreadsheet_csv):
        _, first = OrderLoader().load(spreadsheet_csv)
        _, second = OrderLoader().load(spreadsheet_csv)

        assert first.file_hash is not None
        assert first.file_hash == second.file_hash

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            OrderLoader().load(tmp_path / "missing.csv")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "orders.xlsx"
        path.write_bytes(b"not a spreadsheet")

        with pytest.raises(ValueError):
            OrderLoader().load(path)

    def test_unreadable_file_fails(self, tmp_path):
        path = tmp_path / "orders.csv"
        path.write_bytes(b"order_id,region\nA-1,\xff\xfe\xfd\n")

        df, result = OrderLoader().load(path)

        assert result.status == LoadStatus.FAILED
        assert result.error_message
        assert df.is_empty()
        assert dict(df.schema) == ORDER_SCHEMA
