from evo_foragers.run import app

if __name__ == "__main__":
    # e.g. python run.py --preset quick --show
    app()
