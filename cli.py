#!/usr/bin/env python3
"""
Peptide Dose Calculator CLI
Command-line interface for dose and blend calculations
"""

from datetime import datetime

from blend_calculator import compute_blend_dose, print_blend_report
from calculator import PeptideCalculator, compute_dose
from config import Config
from database import (
    KeyValueStore, save_calculation, list_saved_calculations, load_preferences, save_preferences,
)
from errors import InvalidInputError
from frequency import DosingFrequency
from injection_schedule import check_cycle_length, cycle_schedule, cycle_end_date
from models import get_session, CalculationInput, BlendComponent, BlendCalculationInput
import peptide_catalog

SYRINGE_CHOICES = "u100/u40/tuberculin/standard_1ml"

# Schedule dates printed before the rest are summarized
SCHEDULE_PREVIEW = 14


class PeptideCLI:
    """Command-line interface for the dose calculators"""

    def __init__(self, use_sqlite=True, db_url=None):
        """Initialize CLI with a key-value store session"""
        if db_url:
            self.db_url = db_url
        elif use_sqlite:
            self.db_url = Config.get_database_url(use_sqlite=True)
        else:
            self.db_url = Config.DATABASE_URL

        self.session = get_session(self.db_url)
        self.store = KeyValueStore(self.session)

    def run(self):
        """Main CLI loop"""
        print("\n" + "="*60)
        print("PEPTIDE DOSE CALCULATOR")
        print("="*60)

        while True:
            print("\nMAIN MENU:")
            print("1. List peptides")
            print("2. View peptide details")
            print("3. Dose calculator")
            print("4. Blend calculator")
            print("5. Injection schedule")
            print("6. Saved calculations")
            print("7. Default syringe")
            print("8. Exit")

            choice = input("\nSelect option (1-8): ").strip()

            if choice == "1":
                self.list_peptides()
            elif choice == "2":
                self.view_peptide()
            elif choice == "3":
                self.calculate_dose()
            elif choice == "4":
                self.calculate_blend()
            elif choice == "5":
                self.injection_schedule()
            elif choice == "6":
                self.view_saved()
            elif choice == "7":
                self.set_default_syringe()
            elif choice == "8":
                print("\nGoodbye!")
                break
            else:
                print("Invalid option. Please try again.")

    def default_syringe(self):
        return load_preferences(self.store).get("default_syringe_type") or Config.DEFAULT_SYRINGE_TYPE

    def list_peptides(self):
        """List the reference library"""
        print("\n" + "="*60)
        print("AVAILABLE PEPTIDES")
        print("="*60)

        for i, p in enumerate(peptide_catalog.list_peptides(), 1):
            r = p["dosing_range"]
            print(f"{i}. {p['name']} ({p['scientific_name']})")
            print(f"   Typical dose: {r['min']}-{r['max']} {r['unit']}, {r['frequency']}")
            print()

    def view_peptide(self):
        """View reference details for one peptide"""
        name = input("\nEnter peptide name: ").strip()
        peptide = peptide_catalog.get_peptide_by_name(name)

        if not peptide:
            print(f"\n⚠ Peptide '{name}' not found.")
            return

        r = peptide["dosing_range"]
        print("\n" + "="*60)
        print(f"PEPTIDE DETAILS: {peptide['name']}")
        print("="*60)
        print(f"Scientific name: {peptide['scientific_name']}")
        print(f"Category: {peptide['category']}")
        print(f"Typical dose: {r['min']}-{r['max']} {r['unit']}")
        print(f"Frequency: {r['frequency']}")
        print(f"Cycle length: {r['cycle_length']}")
        if peptide.get("storage"):
            print(f"Storage: {peptide['storage']}")

    def calculate_dose(self):
        """Interactive single-peptide calculator"""
        print("\n" + "="*60)
        print("DOSE CALCULATOR")
        print("="*60)

        try:
            peptide_name = input("\nPeptide name: ").strip()
            vial_strength = float(input("Vial strength: "))
            vial_unit = input("Vial strength unit (mg/mcg) [mg]: ").strip() or "mg"
            ml_water = float(input("Bacteriostatic water to add (ml): "))
            dose = float(input("Desired dose: "))
            dose_unit = input("Dose unit (mcg/mg) [mcg]: ").strip() or "mcg"
            default_syringe = self.default_syringe()
            syringe = input(f"Syringe ({SYRINGE_CHOICES}) [{default_syringe}]: ").strip()
            frequency = input("Frequency (e.g. daily, EOD, weekly) [none]: ").strip() or None
            cost = input("Vial cost [skip]: ").strip()

            known = peptide_catalog.get_peptide_by_name(peptide_name) if peptide_name else None
            calc_input = CalculationInput(
                vial_strength=vial_strength,
                vial_strength_unit=vial_unit,
                diluent_volume=ml_water,
                syringe_type=syringe or default_syringe,
                desired_dose=dose,
                desired_dose_unit=dose_unit,
                dosing_frequency=frequency,
                peptide_id=known["id"] if known else None,
                vial_cost=float(cost) if cost else None,
            )
            result = compute_dose(calc_input)

            report = PeptideCalculator.reconstitution_report(peptide_name, calc_input, result)
            PeptideCalculator.print_reconstitution_report(report)

            if input("Save this calculation? (y/n): ").strip().lower() == "y":
                entry = save_calculation(self.store, calc_input, result, name=peptide_name or None)
                print(f"\n✓ Saved (ID: {entry['id']})")

        except InvalidInputError as e:
            print(f"\n⚠ {e}")
        except ValueError as e:
            print(f"\n⚠ Error: {e}")

    def calculate_blend(self):
        """Interactive blend calculator"""
        print("\n" + "="*60)
        print("BLEND CALCULATOR")
        print("="*60)

        try:
            count = int(input("\nNumber of peptides in the blend: "))
            components = []
            for i in range(1, count + 1):
                name = input(f"Peptide {i} name: ").strip()
                amount = float(input(f"Peptide {i} amount: "))
                unit = input(f"Peptide {i} unit (mg/mcg) [mg]: ").strip() or "mg"
                known = peptide_catalog.get_peptide_by_name(name)
                components.append(BlendComponent(
                    peptide_id=known["id"] if known else name.lower(),
                    peptide_name=known["name"] if known else name,
                    amount=amount,
                    unit=unit,
                ))

            total = float(input("Total vial strength: "))
            total_unit = input("Total vial strength unit (mg/mcg) [mg]: ").strip() or "mg"
            ml_water = float(input("Bacteriostatic water to add (ml): "))
            dose = float(input("Desired dose: "))
            dose_unit = input("Dose unit (mcg/mg) [mcg]: ").strip() or "mcg"
            default_syringe = self.default_syringe()
            syringe = input(f"Syringe ({SYRINGE_CHOICES}) [{default_syringe}]: ").strip()

            blend_input = BlendCalculationInput(
                components=components,
                total_vial_strength=total,
                vial_strength_unit=total_unit,
                diluent_volume=ml_water,
                syringe_type=syringe or default_syringe,
                desired_dose=dose,
                desired_dose_unit=dose_unit,
            )
            result = compute_blend_dose(blend_input)
            print_blend_report(blend_input, result)

        except InvalidInputError as e:
            print(f"\n⚠ {e}")
        except ValueError as e:
            print(f"\n⚠ Error: {e}")

    def injection_schedule(self):
        """Injection dates for one protocol cycle"""
        print("\n" + "="*60)
        print("INJECTION SCHEDULE")
        print("="*60)

        try:
            name = input("\nPeptide name (blank to skip): ").strip()
            peptide = peptide_catalog.get_peptide_by_name(name) if name else None
            default = peptide["dosing_range"]["frequency"] if peptide else "daily"
            frequency = DosingFrequency.parse(input(f"Frequency [{default}]: ").strip() or default)
            weeks = check_cycle_length(float(input("Cycle length (weeks): ")))
            start_text = input("Start date (YYYY-MM-DD) [today]: ").strip()
            if start_text:
                start = datetime.fromisoformat(start_text)
            else:
                start = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)

            dates = cycle_schedule(start, weeks, frequency)
            print(f"\nEvery {frequency.days_per_dose:g} day(s), {len(dates)} injections")
            print(f"Cycle ends: {cycle_end_date(start, weeks):%Y-%m-%d}")
            for d in dates[:SCHEDULE_PREVIEW]:
                print(f"  • {d:%Y-%m-%d %H:%M}")
            if len(dates) > SCHEDULE_PREVIEW:
                print(f"  ... and {len(dates) - SCHEDULE_PREVIEW} more")

        except InvalidInputError as e:
            print(f"\n⚠ {e}")
        except ValueError as e:
            print(f"\n⚠ Error: {e}")

    def view_saved(self):
        """View saved calculations"""
        saved = list_saved_calculations(self.store)

        if not saved:
            print("\n⚠ No saved calculations.")
            return

        print("\n" + "="*60)
        print("SAVED CALCULATIONS")
        print("="*60)

        for entry in saved:
            inp, res = entry["input"], entry["result"]
            print(f"\n{entry.get('name') or 'Unnamed'} ({entry['created_at'][:16]})")
            print(f"  Vial: {inp['vial_strength']} {inp['vial_strength_unit']} in {inp['diluent_volume']} ml")
            print(f"  Dose: {inp['desired_dose']} {inp['desired_dose_unit']}"
                  f" = {res['units_to_draw']} units ({inp['syringe_type']})")
            print(f"  Total doses: {res['total_doses']}")

    def set_default_syringe(self):
        """Store the syringe the calculators offer by default"""
        choice = input(f"\nDefault syringe ({SYRINGE_CHOICES}) [{self.default_syringe()}]: ").strip()
        if not choice:
            return
        try:
            preferences = save_preferences(self.store, {"default_syringe_type": choice})
        except ValueError as e:
            print(f"\n⚠ Error: {e}")
            return
        print(f"\n✓ Default syringe: {preferences['default_syringe_type']}")

    def close(self):
        """Close database session"""
        self.session.close()


def main():
    """Run CLI application"""
    cli = PeptideCLI(use_sqlite=True)

    try:
        cli.run()
    except KeyboardInterrupt:
        print("\n\nInterrupted by user. Exiting...")
    finally:
        cli.close()


if __name__ == "__main__":
    main()
