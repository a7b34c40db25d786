"""
Tests for the ProcedureCollection catalog.
"""

import logging

import pandas as pd
import pytest
from terminal_procedures.models.procedure_collection import ProcedureCollection
from terminal_procedures.models.procedure_definition import ProcedureDefinition
from terminal_procedures.models.procedure_type import ProcedureType
from terminal_procedures.models.queryable_collection import QueryableCollection
from terminal_procedures.models.validation import (
    MalformedProcedureDataError,
    ProcedureConstructionError,
)


@pytest.fixture
def shared_icao_data(sid_data, star_data) -> dict:
    """Return airport data publishing a SID and a STAR under the same identifier."""
    sid_data['icao'] = 'KEPEC3'
    return {'sids': {'KEPEC3': sid_data}, 'stars': {'KEPEC3': star_data}}


class TestFromAirportData:
    """Test cases for loading the catalog."""

    def test_loads_sids_and_stars(self, airport_data):
        """Test both sections are loaded with their procedure type."""
        procedures = ProcedureCollection.from_airport_data(airport_data)

        assert len(procedures) == 2
        assert procedures.sids().map(lambda p: p.icao).all() == ['OFFSH9']
        assert procedures.stars().map(lambda p: p.icao).all() == ['KEPEC3']

    def test_icao_defaults_to_key(self, sid_data):
        """Test the section key is used when a procedure has no identifier."""
        del sid_data['icao']
        procedures = ProcedureCollection.from_airport_data({'sids': {'OFFSH9': sid_data}})

        assert procedures.first().icao == 'OFFSH9'
        assert 'icao' not in sid_data

    def test_missing_sections(self):
        """Test airport data without procedures gives an empty catalog."""
        assert ProcedureCollection.from_airport_data({}).count() == 0

    def test_invalid_procedure_propagates(self):
        """Test a procedure that cannot be built fails the whole load."""
        with pytest.raises(ProcedureConstructionError):
            ProcedureCollection.from_airport_data({'stars': {'BAD1': None}})

    def test_rng_is_shared(self, airport_data):
        """Test the random source is handed to every procedure."""
        class FirstIndex:
            def randint(self, low, high):
                return low

        procedures = ProcedureCollection.from_airport_data(airport_data, rng=FirstIndex())
        assert procedures.find_by_icao('KEPEC3').get_random_exit_point() == '19L'

    def test_logs_counts(self, airport_data, caplog):
        """Test the number of loaded procedures is logged."""
        with caplog.at_level(logging.INFO):
            ProcedureCollection.from_airport_data(airport_data)
        assert 'Loaded 1 SIDs and 1 STARs' in caplog.text


class TestQueries:
    """Test cases for catalog queries."""

    def test_find_by_icao(self, airport_data):
        """Test lookup is case-insensitive and gives None when missing."""
        procedures = ProcedureCollection.from_airport_data(airport_data)

        assert procedures.find_by_icao('offsh9').icao == 'OFFSH9'
        assert procedures.find_by_icao('NOPE1') is None
        assert procedures.find_by_icao('') is None

    def test_find_by_icao_and_type(self, shared_icao_data):
        """Test the procedure type selects between a SID and a STAR of the same name."""
        procedures = ProcedureCollection.from_airport_data(shared_icao_data)

        assert procedures.find_by_icao('KEPEC3').is_sid()
        assert procedures.find_by_icao('KEPEC3', ProcedureType.STAR).is_star()
        assert procedures.find_by_icao('KEPEC3', 'star').is_star()
        assert procedures.find_by_icao('KEPEC3', 'SID').is_sid()

    def test_find_by_icao_unknown_type(self, shared_icao_data):
        """Test an unknown procedure type finds nothing."""
        procedures = ProcedureCollection.from_airport_data(shared_icao_data)
        assert procedures.find_by_icao('KEPEC3', 'APPROACH') is None

    def test_get_waypoints_by_type(self, shared_icao_data):
        """Test routing through the STAR when a SID has the same identifier."""
        procedures = ProcedureCollection.from_airport_data(shared_icao_data)

        waypoints = procedures.get_waypoints('KEPEC3', 'DAG', '25R', procedure_type=ProcedureType.STAR)

        assert [waypoint.name for waypoint in waypoints] == ['DAG', 'MISEN', 'CLARR', 'SKEBR', 'KEPEC', 'IPUMY']
        assert procedures.get_waypoints('KEPEC3', '25L', 'NORTH') is not None

    def test_with_entry_and_exit(self, airport_data):
        """Test filtering by entry and exit names."""
        procedures = ProcedureCollection.from_airport_data(airport_data)

        assert procedures.with_entry('25L').map(lambda p: p.icao).all() == ['OFFSH9']
        assert procedures.with_exit('25R').map(lambda p: p.icao).all() == ['KEPEC3']
        assert not procedures.with_entry('XXX').exists()

    def test_chaining_returns_procedure_collection(self, airport_data):
        """Test filters keep the catalog class so they can be chained."""
        procedures = ProcedureCollection.from_airport_data(airport_data)

        result = procedures.stars().filter(lambda p: p.has_entry('DAG'))

        assert isinstance(result, ProcedureCollection)
        assert isinstance(result, QueryableCollection)
        assert result.first().icao == 'KEPEC3'

    def test_where_and_group_by(self, airport_data):
        """Test attribute matching and grouping."""
        procedures = ProcedureCollection.from_airport_data(airport_data)

        assert procedures.where(procedure_type=ProcedureType.SID).count() == 1
        grouped = procedures.group_by(lambda p: str(p.procedure_type))
        assert list(grouped) == ['SID', 'STAR']

    def test_iteration(self, airport_data):
        """Test the catalog iterates over its procedures in load order."""
        procedures = ProcedureCollection.from_airport_data(airport_data)
        assert [procedure.icao for procedure in procedures] == ['OFFSH9', 'KEPEC3']

    def test_truthiness(self, airport_data):
        """Test an empty catalog is falsy."""
        assert ProcedureCollection.from_airport_data(airport_data)
        assert not ProcedureCollection([])
        assert not ProcedureCollection.from_airport_data(airport_data).with_exit('XXX')

    def test_get_waypoints(self, airport_data):
        """Test routing through a procedure by identifier."""
        procedures = ProcedureCollection.from_airport_data(airport_data)

        waypoints = procedures.get_waypoints('OFFSH9', '25L', 'NORTH')

        assert [waypoint.name for waypoint in waypoints] == ['A1', 'C1', 'B1', 'B2']

    def test_get_waypoints_unknown_procedure(self, airport_data, caplog):
        """Test an unknown procedure is logged and gives None."""
        procedures = ProcedureCollection.from_airport_data(airport_data)

        with caplog.at_level(logging.ERROR):
            assert procedures.get_waypoints('NOPE1', '25L', 'NORTH') is None
        assert 'NOPE1' in caplog.text

    def test_get_waypoints_unknown_exit(self, airport_data):
        """Test an unknown exit gives None."""
        procedures = ProcedureCollection.from_airport_data(airport_data)
        assert procedures.get_waypoints('KEPEC3', 'DAG', '07R') is None

    def test_all_fix_names_in_use(self, airport_data):
        """Test names of all procedures are listed in load order."""
        procedures = ProcedureCollection.from_airport_data(airport_data)

        names = procedures.get_all_fix_names_in_use()

        assert names[:7] == ['A1', 'A2', 'C1', 'B1', 'B2', 'B3', 'B4']
        assert names[7:] == ['DAG', 'MISEN', 'TNP', 'JOTNU', 'CLARR', 'SKEBR', 'KEPEC', 'IPUMY', 'NIPZO']

    def test_all_fix_names_malformed_draw(self, airport_data):
        """Test a malformed procedure fails the catalog listing."""
        airport_data['stars']['KEPEC3']['draw'] = ['DAG', 'MISEN']
        procedures = ProcedureCollection.from_airport_data(airport_data)

        with pytest.raises(MalformedProcedureDataError):
            procedures.get_all_fix_names_in_use()

    def test_repr(self, airport_data):
        """Test the representation previews identifiers."""
        procedures = ProcedureCollection.from_airport_data(airport_data)
        assert repr(procedures) == "ProcedureCollection(['OFFSH9', 'KEPEC3'], count=2)"


class TestValidateAndReset:
    """Test cases for catalog validation and teardown."""

    def test_validate_prefixes_errors(self, airport_data):
        """Test errors are prefixed with the procedure identifier."""
        airport_data['sids']['OFFSH9']['draw'] = ['A1']
        procedures = ProcedureCollection.from_airport_data(airport_data)

        result = procedures.validate()

        assert not result.is_valid
        assert result.errors[0].field == 'OFFSH9.draw'

    def test_validate_logs_warnings(self, airport_data, caplog):
        """Test warnings are logged."""
        airport_data['stars']['KEPEC3']['rwy'] = {}
        procedures = ProcedureCollection.from_airport_data(airport_data)

        with caplog.at_level(logging.WARNING):
            result = procedures.validate()

        assert result.is_valid
        assert 'KEPEC3 has no exit points' in caplog.text

    def test_reset(self, airport_data):
        """Test reset empties the catalog and every procedure."""
        procedures = ProcedureCollection.from_airport_data(airport_data)
        sid = procedures.find_by_icao('OFFSH9')

        procedures.reset()

        assert procedures.count() == 0
        assert sid.icao == ''
        assert sid.entry_names == []


class TestToDataFrame:
    """Test cases for the tabular summary."""

    def test_summary(self, airport_data):
        """Test one row per procedure with joined entry and exit names."""
        df = ProcedureCollection.from_airport_data(airport_data).to_dataframe()

        assert isinstance(df, pd.DataFrame)
        assert list(df['icao']) == ['OFFSH9', 'KEPEC3']
        assert list(df['procedure_type']) == ['SID', 'STAR']
        assert df.loc[0, 'entries'] == '25L,25R'
        assert df.loc[1, 'exits'] == '19L,25R'
        assert list(df['body_length']) == [1, 3]

    def test_empty_summary_has_columns(self):
        """Test an empty catalog still has the summary columns."""
        df = ProcedureCollection([]).to_dataframe()

        assert df.empty
        assert list(df.columns) == ['icao', 'name', 'procedure_type', 'entries', 'exits', 'body_length']

    def test_built_from_definitions(self, sid_data):
        """Test a catalog built directly from definitions."""
        sid = ProcedureDefinition(ProcedureType.SID, sid_data)
        df = ProcedureCollection([sid]).to_dataframe()
        assert df.loc[0, 'name'] == 'Offshore Nine'
