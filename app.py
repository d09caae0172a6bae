# app.py
"""
Entrypoint da aplicação.

Uso:
  python app.py migrate --db stockguard.db
  python app.py perfil registrar --cpf 123.456.789-09 --nome "Maria Silva" --email maria@loja.com
  python app.py produto criar P1 "Linha Azul" --quantidade 10 --minimo 2 --cpf 12345678909
  python app.py estoque ajustar P1 venda 4 --cpf 12345678909
  python app.py mov exportar movimentacoes.csv
"""

from stockguard.adapters.cli import main

if __name__ == "__main__":
    main()
