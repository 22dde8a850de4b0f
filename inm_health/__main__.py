from inm_health.cli import main

main(prog_name="inm-health")
