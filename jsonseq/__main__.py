from jsonseq.cli import main

main()
