from kuberun.cli.app import app

app(prog_name="kuberun")
